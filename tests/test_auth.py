from unittest import mock

import pytest

from dbuswire.auth import AuthenticationProtocol, AuthRequired
from dbuswire.octetbuffer import OctetBuffer


class FakeTransport:
    def __init__(self):
        self.sent = []
        self.auth_completed = 0

    def send_string_direct(self, data):
        self.sent.append(data)

    def on_auth_complete(self):
        self.auth_completed += 1


@pytest.fixture
def wire():
    return FakeTransport()


@pytest.fixture
def auth(wire):
    return AuthenticationProtocol(wire)


def test_send_auth_hex_encodes_uid(auth, wire):
    with mock.patch("os.getuid", return_value=1000):
        auth.send_auth()
    assert wire.sent == ["AUTH EXTERNAL 31303030\r\n"]
    assert auth.on_command("OK abcd\r\n") is True
    assert wire.sent[-1] == "BEGIN\r\n"


def test_send_auth_list_methods(auth, wire):
    auth.send_auth_list_methods()
    assert wire.sent == ["AUTH\r\n"]
    assert auth.on_command("REJECTED EXTERNAL ANONYMOUS\r\n") is False
    assert wire.sent == ["AUTH\r\n"]


def test_send_data_hex_encodes(auth, wire):
    auth.send_data(b"hi")
    auth.send_data("hi")
    assert wire.sent == ["DATA 6869\r\n", "DATA 6869\r\n"]
    assert auth.on_command("DATA 6869\r\n") is False
    assert wire.auth_completed == 0


def test_basic_ok_sends_begin(auth, wire):
    auth.send_auth(AuthRequired.BASIC)
    wire.sent.clear()
    buffer = OctetBuffer(b"OK 1234deadbeef\r\n")
    assert auth.on_receive_data(buffer) is True
    assert wire.sent == ["BEGIN\r\n"]
    assert wire.auth_completed == 1
    assert auth.server_guid == "1234deadbeef"
    assert buffer.empty()


def test_data_after_ok_is_left_in_buffer(auth, wire):
    auth.send_auth(AuthRequired.BASIC)
    buffer = OctetBuffer(b"OK abcd\r\nl\x01\x00\x01")
    assert auth.on_receive_data(buffer) is True
    assert bytes(buffer) == b"l\x01\x00\x01"


def test_negotiate_unix_fd_flow(auth, wire):
    auth.send_auth(AuthRequired.NEGOTIATE_UNIX_FD)
    wire.sent.clear()
    assert auth.on_receive_data(OctetBuffer(b"OK abcd\r\n")) is False
    assert wire.sent == ["NEGOTIATE_UNIX_FD\r\n"]
    assert wire.auth_completed == 0
    assert auth.on_receive_data(OctetBuffer(b"AGREE_UNIX_FD\r\n")) is True
    assert wire.sent == ["NEGOTIATE_UNIX_FD\r\n", "BEGIN\r\n"]
    assert wire.auth_completed == 1


def test_line_split_across_chunks(auth, wire):
    auth.send_auth(AuthRequired.BASIC)
    wire.sent.clear()
    assert auth.on_receive_data(OctetBuffer(b"OK ab")) is False
    assert wire.sent == []
    assert auth.on_receive_data(OctetBuffer(b"cd\r\n")) is True
    assert auth.server_guid == "abcd"


def test_rejected_does_not_authenticate(auth, wire):
    buffer = OctetBuffer(b"REJECTED EXTERNAL DBUS_COOKIE_SHA1 ANONYMOUS\r\n")
    assert auth.on_receive_data(buffer) is False
    assert wire.sent == []
    assert wire.auth_completed == 0


@pytest.mark.parametrize(
    "command",
    ["ERROR oops\r\n", "DATA 00\r\n", "CANCEL\r\n", "AUTH EXTERNAL\r\n", "BOGUS\r\n"],
)
def test_commands_that_do_not_authenticate(auth, wire, command):
    assert auth.on_command(command) is False
    assert wire.auth_completed == 0


def test_reset_resends_auth_with_previous_type(auth, wire):
    with mock.patch("os.getuid", return_value=1000):
        auth.send_auth(AuthRequired.NEGOTIATE_UNIX_FD)
        auth.on_receive_data(OctetBuffer(b"OK ab"))
        auth.reset()
    assert wire.sent[0] == wire.sent[1]
    wire.sent.clear()
    assert auth.on_receive_data(OctetBuffer(b"OK cd\r\n")) is False
    assert wire.sent == ["NEGOTIATE_UNIX_FD\r\n"]
    assert auth.server_guid == "cd"