import logging
import socket
import uuid
from enum import Enum
from typing import Optional

from activeftp.entities.data_connection import DataEndpoint
from activeftp.entities.file_transfer import TransferType

logger = logging.getLogger("activeftp.client_session")

# longitud máxima (bytes) de una línea de control, sin contar el CRLF
MAX_LINE_LENGTH = 8192


class LineTooLongError(Exception):
    """El cliente envió una línea de control más larga que MAX_LINE_LENGTH."""
    pass


class AuthState(Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AWAITING_PASSWORD = "AWAITING_PASSWORD"
    AUTHENTICATED = "AUTHENTICATED"


class DataMode(Enum):
    NONE = "NONE"
    ACTIVE = "ACTIVE"


class ClientSession:
    """
    Representa una sesión FTP asociada a una conexión de control.

    Una sesión pertenece a un único hilo (el que atiende su conexión de
    control): solo ese hilo lee o modifica su estado, por eso no tiene lock.
    Otros hilos únicamente pueden leer `describe()` para observabilidad o
    cerrar el socket de control al apagar el servidor.
    """

    def __init__(self, client_address=None, control_socket: Optional["socket.socket"] = None, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex[:8]
        self.client_address = client_address
        self._control_socket = control_socket

        self.reset_session()

    # -------------------- Session lifecycle --------------------

    def reset_session(self) -> None:
        """Resetea la sesión a su estado inicial."""
        self._username: Optional[str] = None
        self._auth_state = AuthState.UNAUTHENTICATED
        self._cwd: str = "/"

        self._transfer_type = TransferType.BINARY
        self._data_mode = DataMode.NONE
        self._data_endpoint: Optional[DataEndpoint] = None

    def get_session_id(self) -> str:
        return self.session_id

    # -------------------- User / auth --------------------

    def change_user(self, username: Optional[str], need_password: bool) -> None:
        """
        Cambia el usuario de la sesión.
        Descarta cualquier login previo: una contraseña validada para otro
        usuario no se hereda.
        """
        self._username = username
        self._auth_state = AuthState.AWAITING_PASSWORD if need_password else AuthState.AUTHENTICATED
        logger.info("Username set to %s for %s", username, self.client_address)

    def authenticate(self) -> None:
        self._auth_state = AuthState.AUTHENTICATED
        logger.info("User %s authenticated successfully", self._username)

    def is_authenticated(self) -> bool:
        return self._auth_state is AuthState.AUTHENTICATED

    def get_auth_state(self) -> AuthState:
        return self._auth_state

    def get_username(self) -> Optional[str]:
        return self._username

    # -------------------- Working directory --------------------

    def get_cwd(self) -> str:
        return self._cwd

    # ------------------- Transfer Type  ---------------------

    def set_transfer_type(self, transfer_type: TransferType) -> None:
        self._transfer_type = transfer_type

    def get_transfer_type(self) -> TransferType:
        return self._transfer_type

    # -------------------- Active mode --------------------

    def enter_active_mode(self, endpoint: DataEndpoint) -> None:
        """Guarda el endpoint anunciado por PORT; reemplaza al anterior."""
        self._data_endpoint = endpoint
        self._data_mode = DataMode.ACTIVE
        logger.info("Active mode endpoint %s for %s", endpoint, self.client_address)

    def get_data_mode(self) -> DataMode:
        return self._data_mode

    def get_data_endpoint(self) -> Optional[DataEndpoint]:
        return self._data_endpoint if self._data_mode is DataMode.ACTIVE else None

    def consume_data_endpoint(self) -> Optional[DataEndpoint]:
        """
        Retorna el endpoint negociado y vuelve al modo NONE.
        Cada endpoint sirve para una sola transferencia.
        """
        endpoint = self.get_data_endpoint()
        self._data_endpoint = None
        self._data_mode = DataMode.NONE
        return endpoint

    # -------------------- Control socket --------------------

    def send_response(self, code: int, message: str) -> None:
        """
        Envía una respuesta al cliente a través del socket de control.
        Formato RFC-959: "CODE message\r\n"
        """
        sock = self._control_socket
        if not sock:
            logger.warning("No control socket set for session %s", self.session_id)
            return

        line = f"{code} {message}\r\n"
        sock.sendall(line.encode("utf-8"))
        logger.info("Sent to %s: %s", self.client_address, line.strip())

    def recv_lines(self):
        """
        Recibe datos del cliente y los separa en líneas (sin CRLF).
        Los errores de lectura se propagan al dispatcher; una línea mayor que
        MAX_LINE_LENGTH lanza LineTooLongError.
        """
        buffer = b""

        for chunk in self._recv_chunks():
            buffer += chunk

            while b"\n" in buffer:
                raw, buffer = buffer.split(b"\n", 1)
                yield self._decode_line(self._check_length(raw))

            self._check_length(buffer)

        # En caso de que quede algo en el buffer
        if buffer.rstrip(b"\r"):
            yield self._decode_line(buffer)

    @staticmethod
    def _check_length(raw: bytes) -> bytes:
        if len(raw.rstrip(b"\r")) > MAX_LINE_LENGTH:
            raise LineTooLongError(f"Control line longer than {MAX_LINE_LENGTH} bytes")
        return raw

    @staticmethod
    def _decode_line(raw: bytes) -> str:
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode("utf-8", errors="replace")

    def _recv_chunks(self, chunk_size: int = 4096):
        sock = self._control_socket
        while sock is not None:
            chunk = sock.recv(chunk_size)

            if not chunk:
                break

            yield chunk

    def close(self) -> None:
        """Cierra la conexión de control."""
        sock, self._control_socket = self._control_socket, None
        if sock is None:
            return

        try:
            # despierta a un recv() bloqueado en el hilo de la sesión
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass

        try:
            sock.close()
        except OSError:
            logger.exception("Error closing control socket for %s", self.client_address)

    # -------------------- Debug / logging --------------------

    def describe(self) -> dict:
        """Resumen de la sesión para el registro de sesiones activas."""
        return {
            "session_id": self.session_id,
            "client": f"{self.client_address[0]}:{self.client_address[1]}" if self.client_address else "unknown",
            "username": self._username if self.is_authenticated() else None,
            "cwd": self._cwd,
        }

    def __str__(self) -> str:
        return (
            f"ClientSession("
            f"id={self.session_id}, "
            f"user={self._username or 'anonymous'}, "
            f"auth={self._auth_state.value}, "
            f"CWD={self._cwd}, "
            f"Mode={self._data_mode.value}, "
            f"Transfer={self._transfer_type.value}"
            f")"
        )
