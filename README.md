# dbuswire

Pure-Python building blocks for the D-Bus wire protocol over a Unix stream
socket. It has no third-party dependencies and needs a POSIX system, because
it uses `os.getuid` and `AF_UNIX` sockets.

## Modules

- `dbuswire.log` is a process-wide logger that writes to stderr and filters by
  level. It provides `Level` (`TRACE`, `INFO`, `WARNING`, `ERROR`), `set_level`,
  `is_active`, `write` (printf-style), `write_hex` (32 octets per row) and
  `flush`. The default level is `WARNING`.
- `dbuswire.platform` finds bus socket paths.
  - `get_system_bus(address)` and `get_session_bus(address)` accept
    `unix:path=` and `unix:abstract=` addresses. An abstract address becomes a
    path that starts with a NUL byte, and any `,guid=` suffix is removed.
  - When called with no argument, they read `DBUS_SYSTEM_BUS_ADDRESS` or
    `DBUS_SESSION_BUS_ADDRESS`.
  - When no address is available, the system bus falls back to
    `/var/run/dbus/system_bus_socket` and the session bus returns `""`.
  - `get_uid()` returns the real user id.
- `dbuswire.octetbuffer.OctetBuffer` is a read-only view of bytes that is
  consumed from the front. It provides `remove_prefix`, `copy`, `find`,
  `empty`, indexing and `len`. Out-of-range access raises `IndexError`.
- `dbuswire.istream.MessageIStream` reads marshalled data and tracks the offset
  so that reads stay aligned. It provides `read_byte`, `read_bytes`,
  `read_integer(size, signed)`, `read_double`, `read_string`, `align`, `empty`
  and `sub_stream(size)`. The byte order is either native or swapped.
- `dbuswire.signature` works on type signatures.
  - `extract_signature(declaration, idx)` returns the single complete type
    that starts at `idx`.
  - `split_signature(declaration)` splits a signature into its complete types.
  - `get_alignment(declaration)` returns the wire alignment of the leading
    type.
  - Malformed signatures raise `SignatureError`, which is a `ValueError`.
- `dbuswire.introspect` builds introspection XML from `Introspection`,
  `Interface`, `Method`, `Property` and `Signal`, with `Access` for property
  rights.
- `dbuswire.matchrule` parses match-rule strings into `MatchRule` objects.
  - The rule checks `sender`, `interface`, `member`, `destination`, `path` and
    `path_namespace` against any object that has those attributes, such as
    `SignalHeader`.
  - The `type`, `eavesdrop` and `arg*` keys are accepted but not checked.
  - A rule with both `path` and `path_namespace` raises `ValueError`.
- `dbuswire.transport.Transport` is a Unix-socket connection.
  - When it opens, it sends the credentials NUL byte and reads the socket in a
    background thread. It passes each chunk to the handler set with
    `set_data_handler`.
  - `send_string` holds messages back until `on_auth_complete` is called.
    `send_string_direct` sends at once.
  - `get_stats` reports the transport's counters.
  - `Transport` is a context manager; `close` shuts the socket down.
- `dbuswire.auth.AuthenticationProtocol` is the client side of the
  `AUTH EXTERNAL` handshake.
  - `send_auth(AuthRequired.BASIC)` sends `BEGIN` after `OK`.
    `AuthRequired.NEGOTIATE_UNIX_FD` sends `NEGOTIATE_UNIX_FD` first and then
    `BEGIN` on `AGREE_UNIX_FD`.
  - `on_receive_data` returns `True` once the handshake is done and leaves any
    following bytes in the buffer.

## Examples

Build an introspection document:

```python
from dbuswire import log
from dbuswire.introspect import Interface, Introspection, Method, Property, Signal
from dbuswire.platform import get_session_bus

log.set_level(log.Level.WARNING)

iface = Interface("com.example.TestInterface")
iface.add_method(Method("Echo2", "ss", "s"))
iface.add_property(Property("p1", "s"))
iface.add_signal(Signal("BroadcastStuff", "s"))

doc = Introspection()
doc.add_interface(iface)
print(doc.serialize())

print(get_session_bus("unix:path=/run/user/1000/bus"))  # /run/user/1000/bus
```

Match signals against a rule:

```python
from dbuswire.matchrule import MatchRule, SignalHeader

rule = MatchRule("interface='org.example.Iface',path_namespace='/com/example'", print)
header = SignalHeader(interface="org.example.Iface", path="/com/example/foo")
if rule.is_matched(header):
    rule.invoke(header)
```

Authenticate on the session bus:

```python
from dbuswire.auth import AuthenticationProtocol, AuthRequired
from dbuswire.platform import get_session_bus
from dbuswire.transport import Transport

with Transport(get_session_bus()) as transport:
    auth = AuthenticationProtocol(transport)
    transport.set_data_handler(auth.on_receive_data)
    auth.send_auth(AuthRequired.BASIC)
    # Once the server answers OK, BEGIN is sent and queued messages go out.
```

## What it does not do

dbuswire does not marshal or unmarshal whole D-Bus messages. It has no
message or value-type classes, and no connection object that sends method
calls, replies to them or dispatches incoming signals. After authentication,
`Transport` passes the raw received bytes to your handler. `MessageIStream`
and the signature helpers can help you decode those bytes, but you have to
assemble messages yourself.

## Running the tests

```
pip install -e .[test]
pytest
```