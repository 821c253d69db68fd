import socket

import pytest

from activeftp.entities.client_session import ClientSession
from activeftp.entities.ftp_server import FtpServer
from activeftp.entities.settings import Settings

README_CONTENT = b"hello world"


class RecordingSocket:
    """Socket de control falso: guarda todo lo enviado."""

    def __init__(self):
        self.sent = b""
        self.closed = False

    def sendall(self, data: bytes) -> None:
        self.sent += data

    def lines(self) -> list[str]:
        return [line for line in self.sent.decode("utf-8").split("\r\n") if line]

    def shutdown(self, how) -> None:
        pass

    def close(self) -> None:
        self.closed = True


class RecordingConnection:
    """Conexión de datos falsa para probar el motor de transferencia."""

    def __init__(self, fail_with: Exception = None):
        self.data = b""
        self.fail_with = fail_with

    def sendall(self, data: bytes) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.data += data


class ControlClient:
    """Cliente mínimo de la conexión de control."""

    def __init__(self, address):
        self.sock = socket.create_connection(address, timeout=5)
        self.reader = self.sock.makefile("rb")

    def readline(self) -> str:
        return self.reader.readline().decode("utf-8").rstrip("\r\n")

    def send(self, line: str) -> None:
        self.sock.sendall(line.encode("utf-8") + b"\r\n")

    def cmd(self, line: str) -> str:
        self.send(line)
        return self.readline()

    def close(self) -> None:
        self.reader.close()
        self.sock.close()


class DataListener:
    """Listener del lado cliente para las conexiones de datos en modo activo."""

    def __init__(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(1)

    @property
    def port(self) -> int:
        return self.sock.getsockname()[1]

    def port_argument(self) -> str:
        return f"127,0,0,1,{self.port // 256},{self.port % 256}"

    def receive_all(self, timeout: float = 5) -> bytes:
        self.sock.settimeout(timeout)
        conn, _ = self.sock.accept()
        with conn:
            conn.settimeout(timeout)
            chunks = []
            while True:
                chunk = conn.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def was_dialed(self, timeout: float = 0.3) -> bool:
        self.sock.settimeout(timeout)
        try:
            conn, _ = self.sock.accept()
        except socket.timeout:
            return False
        conn.close()
        return True

    def close(self) -> None:
        self.sock.close()


@pytest.fixture
def base_dir(tmp_path):
    root = tmp_path / "root"
    root.mkdir()
    (root / "readme.txt").write_bytes(README_CONTENT)
    (root / "docs").mkdir()
    (root / "docs" / "notes.txt").write_bytes(b"line one\nline two\n")
    return root


@pytest.fixture
def settings(base_dir):
    s = Settings(need_auth=True, base_directory=str(base_dir), data_connect_timeout=5.0)
    s.add_user("alice", "secret", rounds=4)
    return s


@pytest.fixture
def server(settings):
    return FtpServer(settings, host="127.0.0.1", port=0)


@pytest.fixture
def control_socket():
    return RecordingSocket()


@pytest.fixture
def session(control_socket):
    return ClientSession(client_address=("127.0.0.1", 50000), control_socket=control_socket)


@pytest.fixture
def running_server(server):
    server.start()
    yield server
    server.shutdown()


@pytest.fixture
def client(running_server):
    c = ControlClient(running_server.address)
    yield c
    c.close()


@pytest.fixture
def data_listener():
    listener = DataListener()
    yield listener
    listener.close()
