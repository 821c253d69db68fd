import pytest

from activeftp.entities.file_transfer import (
    TransferError,
    TransferType,
    send_file,
    send_lines,
)
from conftest import README_CONTENT, RecordingConnection


def test_binary_sends_bytes_verbatim(base_dir):
    payload = bytes(range(256)) * 600 + b"\r\n\n"
    (base_dir / "blob.bin").write_bytes(payload)
    conn = RecordingConnection()

    sent = send_file(str(base_dir / "blob.bin"), conn, TransferType.BINARY)

    assert conn.data == payload
    assert sent == len(payload)


def test_text_uses_crlf_line_endings(base_dir):
    (base_dir / "mixed.txt").write_bytes(b"one\ntwo\r\nthree")
    conn = RecordingConnection()

    send_file(str(base_dir / "mixed.txt"), conn, TransferType.TEXT)

    assert conn.data == b"one\r\ntwo\r\nthree"


def test_text_of_simple_file(base_dir):
    conn = RecordingConnection()
    send_file(str(base_dir / "readme.txt"), conn, TransferType.TEXT)
    assert conn.data == README_CONTENT


def test_io_failure_on_data_connection_maps_to_452(base_dir):
    conn = RecordingConnection(fail_with=BrokenPipeError("gone"))

    with pytest.raises(TransferError) as excinfo:
        send_file(str(base_dir / "readme.txt"), conn, TransferType.BINARY)

    assert excinfo.value.code == 452


def test_unreadable_source_maps_to_452(base_dir):
    with pytest.raises(TransferError) as excinfo:
        send_file(str(base_dir / "missing.bin"), RecordingConnection(), TransferType.BINARY)
    assert excinfo.value.code == 452


def test_other_failure_maps_to_426(base_dir):
    (base_dir / "latin1.txt").write_bytes(b"caf\xe9\n")

    with pytest.raises(TransferError) as excinfo:
        send_file(str(base_dir / "latin1.txt"), RecordingConnection(), TransferType.TEXT)

    assert excinfo.value.reply() == (426, "Connection closed; transfer aborted")


def test_send_lines():
    conn = RecordingConnection()
    send_lines(["a", "b"], conn)
    assert conn.data == b"a\r\nb\r\n"


def test_send_lines_failure():
    with pytest.raises(TransferError) as excinfo:
        send_lines(["a"], RecordingConnection(fail_with=ConnectionResetError()))
    assert excinfo.value.code == 452
