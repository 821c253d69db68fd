import socket

import pytest

from activeftp.entities.client_session import MAX_LINE_LENGTH, AuthState, ClientSession, DataMode, LineTooLongError
from activeftp.entities.data_connection import DataEndpoint
from activeftp.entities.file_transfer import TransferType


def test_initial_state(session):
    assert session.get_auth_state() is AuthState.UNAUTHENTICATED
    assert session.get_username() is None
    assert session.get_cwd() == "/"
    assert session.get_transfer_type() is TransferType.BINARY
    assert session.get_data_mode() is DataMode.NONE
    assert session.get_data_endpoint() is None


def test_change_user_resets_login(session):
    session.change_user("alice", need_password=True)
    session.authenticate()
    assert session.is_authenticated()

    session.change_user("bob", need_password=True)

    assert session.get_auth_state() is AuthState.AWAITING_PASSWORD
    assert not session.is_authenticated()


def test_endpoint_is_consumed_once(session):
    session.enter_active_mode(DataEndpoint("127.0.0.1", 8000))
    session.enter_active_mode(DataEndpoint("127.0.0.1", 8001))

    assert session.get_data_mode() is DataMode.ACTIVE
    assert session.consume_data_endpoint() == DataEndpoint("127.0.0.1", 8001)
    assert session.get_data_mode() is DataMode.NONE
    assert session.consume_data_endpoint() is None


def test_send_response_format(session, control_socket):
    session.send_response(200, "OK")
    assert control_socket.sent == b"200 OK\r\n"


def test_recv_lines_splits_crlf_and_lf():
    left, right = socket.socketpair()
    try:
        session = ClientSession(client_address=("127.0.0.1", 1), control_socket=left)
        right.sendall(b"USER alice\r\nPWD\n\r\nLIST docs")
        right.shutdown(socket.SHUT_WR)

        assert list(session.recv_lines()) == ["USER alice", "PWD", "", "LIST docs"]
    finally:
        left.close()
        right.close()


def test_recv_lines_keeps_multibyte_characters_split_across_reads():
    left, right = socket.socketpair()
    try:
        session = ClientSession(client_address=("127.0.0.1", 1), control_socket=left)
        data = "RETR café.txt\r\n".encode("utf-8")
        cut = data.index(b"\xa9")
        right.sendall(data[:cut])
        lines = session.recv_lines()
        right.sendall(data[cut:])
        right.shutdown(socket.SHUT_WR)

        assert list(lines) == ["RETR café.txt"]
    finally:
        left.close()
        right.close()


def test_close_is_idempotent(session, control_socket):
    session.close()
    session.close()
    assert control_socket.closed


def test_recv_lines_rejects_line_without_newline_over_limit():
    left, right = socket.socketpair()
    try:
        session = ClientSession(client_address=("127.0.0.1", 1), control_socket=left)
        right.sendall(b"USER alice\r\n" + b"A" * (MAX_LINE_LENGTH + 1))
        lines = session.recv_lines()

        assert next(lines) == "USER alice"
        with pytest.raises(LineTooLongError):
            next(lines)
    finally:
        left.close()
        right.close()


def test_recv_lines_accepts_line_at_limit():
    left, right = socket.socketpair()
    try:
        session = ClientSession(client_address=("127.0.0.1", 1), control_socket=left)
        right.sendall(b"A" * MAX_LINE_LENGTH + b"\r\n")
        right.shutdown(socket.SHUT_WR)

        assert list(session.recv_lines()) == ["A" * MAX_LINE_LENGTH]
    finally:
        left.close()
        right.close()
