"""Parsing of type signatures into single complete types."""

from __future__ import annotations

from dbuswire import log

__all__ = ["SignatureError", "extract_signature", "split_signature", "get_alignment"]


class SignatureError(ValueError):
    """Raised when a type signature is malformed."""


_ALIGNMENTS = {
    "y": 1,  # byte
    "b": 4,  # boolean
    "n": 2,  # int16
    "q": 2,  # uint16
    "i": 4,  # int32
    "u": 4,  # uint32
    "x": 8,  # int64
    "t": 8,  # uint64
    "d": 8,  # double
    "s": 4,  # string
    "o": 4,  # object path
    "g": 1,  # signature
    "a": 4,  # array
    "v": 1,  # variant
    "(": 8,  # struct
    "{": 8,  # dict entry
}

_CLOSERS = {"(": ")", "{": "}"}


def _extract_bracketed(declaration: str, idx: int) -> str:
    opener = declaration[idx]
    closer = _CLOSERS[opener]
    depth = 0
    for end in range(idx, len(declaration)):
        char = declaration[end]
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return declaration[idx:end + 1]
    kind = "brackets in the struct" if opener == "(" else "braces in the dictentry"
    raise SignatureError(f"The declaration is invalid due to mis-matched {kind} signature.")


def extract_signature(declaration: str, idx: int = 0) -> str:
    """Return the single complete type that starts at ``idx`` in ``declaration``."""
    if not 0 <= idx < len(declaration):
        raise SignatureError(
            f"No complete type at position {idx} of signature {declaration!r}"
        )

    char = declaration[idx]
    if char == "(":
        return _extract_bracketed(declaration, idx)
    if char == "{":
        if idx == 0:
            log.write(
                log.Level.ERROR,
                "DBus :: The declaration is invalid because a dictentry must "
                "be inside an array container type.\n",
            )
        return _extract_bracketed(declaration, idx)
    if char == "a":
        return char + extract_signature(declaration, idx + 1)
    return char


def split_signature(declaration: str) -> list[str]:
    """Split a signature holding several complete types into its parts."""
    parts: list[str] = []
    idx = 0
    while idx < len(declaration):
        part = extract_signature(declaration, idx)
        parts.append(part)
        idx += len(part)
    return parts


def get_alignment(declaration: str) -> int:
    """Return the wire alignment of the type that ``declaration`` begins with."""
    if not declaration:
        return 1
    return _ALIGNMENTS.get(declaration[0], 1)