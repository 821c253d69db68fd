import logging
import socket
import threading
from typing import Callable, Optional

from activeftp.commands.handlers_dispatch import get_handler
from activeftp.entities.client_session import ClientSession, LineTooLongError
from activeftp.entities.command import Command
from activeftp.entities.data_connection import DataConnection, DataEndpoint
from activeftp.entities.file_system_manager import FileSystemManager
from activeftp.entities.session_table import SessionTable
from activeftp.entities.settings import Settings

logger = logging.getLogger("activeftp.server")

DEFAULT_GREETING = "Service Ready"


class FtpServer:
    """
    Servidor FTP:

    - Escucha conexiones entrantes (canal de control)
    - Por cada cliente aceptado lanza un handler en un hilo separado
    - Mantiene las sesiones activas en su propia SessionTable
    """

    def __init__(self, settings: Settings, host: str = "127.0.0.1", port: int = 2121, backlog: int = 50,
                 on_client: Optional[Callable[["FtpServer", ClientSession], None]] = None):
        self.settings = settings
        self.host = host
        self.port = port
        self.backlog = backlog
        self.on_client = on_client

        self.fs = FileSystemManager(settings.base_directory)
        self.sessions = SessionTable()

        self._server_sock: Optional[socket.socket] = None
        self._listener_thread: Optional[threading.Thread] = None
        self._stopped = threading.Event()

    # -------------------- Listener --------------------

    @property
    def address(self) -> tuple[str, int]:
        """(host, port) real en el que se escucha (útil con port=0)."""
        if self._server_sock is None:
            return self.host, self.port
        return self._server_sock.getsockname()[:2]

    def bind(self) -> None:
        """Abre el socket de escucha."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
            sock.listen(self.backlog)
        except OSError:
            sock.close()
            raise

        self._server_sock = sock
        self._stopped.clear()
        logger.info("FTP connection listener started on %s:%d serving %s", *self.address, self.fs.root_dir)

    def start(self) -> None:
        """Escucha en un hilo en segundo plano."""
        if self._server_sock is None:
            self.bind()
        self._listener_thread = threading.Thread(target=self.serve_forever, name="ftp-listener", daemon=True)
        self._listener_thread.start()

    def serve_forever(self) -> None:
        """Bucle que acepta nuevas conexiones. Cada cliente se maneja en un hilo independiente."""
        if self._server_sock is None:
            self.bind()

        server_sock = self._server_sock
        try:
            while not self._stopped.is_set():
                try:
                    client_sock, client_addr = server_sock.accept()
                except OSError:
                    if self._stopped.is_set():
                        break
                    logger.exception("Error accepting connection")
                    continue

                logger.info("Accepted connection from %s", client_addr)
                t = threading.Thread(target=self.client_handler, args=(client_sock, client_addr), daemon=True)
                t.start()

        finally:
            logger.info("Connection listener stopped")

    def shutdown(self) -> None:
        """Deja de aceptar conexiones y cierra todas las conexiones de control."""
        self._stopped.set()

        if self._server_sock is not None:
            try:
                # despierta al accept() bloqueado
                self._server_sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            try:
                self._server_sock.close()
            except OSError:
                logger.exception("Error closing listener socket")
            self._server_sock = None

        for session in self.sessions.get_all_sessions():
            session.close()

        if self._listener_thread is not None and self._listener_thread is not threading.current_thread():
            self._listener_thread.join(timeout=5)
            self._listener_thread = None

    # -------------------- Per client --------------------

    def client_handler(self, client_socket: socket.socket, client_address) -> None:
        """Crear sesión, registrarla y ejecutar el dispatcher para el cliente."""
        session = ClientSession(client_address=client_address, control_socket=client_socket)
        self.sessions.add(session)

        try:
            # aceptada justo antes de shutdown(): puede que shutdown no la haya visto en la tabla
            if self._stopped.is_set():
                logger.info("Server stopping, dropping connection from %s", client_address)
                return

            if self.on_client is not None:
                try:
                    self.on_client(self, session)
                except Exception:
                    logger.exception("on_client callback failed for %s", client_address)

            session.send_response(220, self.settings.banner or DEFAULT_GREETING)
            self.command_dispatcher(session)

        except LineTooLongError as e:
            logger.warning("Closing connection with %s: %s", client_address, e)

        except OSError as e:
            logger.warning("Control connection with %s failed: %s", client_address, e)

        except Exception:
            logger.exception("Error while handling client %s, closing connection", client_address)

        finally:
            self.sessions.remove_by_id(session.get_session_id())
            session.close()
            logger.info("Session %s for %s closed", session.get_session_id(), client_address)

    def command_dispatcher(self, session: ClientSession) -> None:
        """Leer la conexión de control línea a línea y despachar cada comando a su handler."""
        for line in session.recv_lines():
            if not line:
                logger.info("Empty line from %s, disconnecting", session.client_address)
                return

            command = Command(line)
            logger.info("Received command from %s: %s", session.client_address, command)

            handler = get_handler(command.verb)
            code, message = handler(command, session, self)
            session.send_response(code, message)

        logger.info("Client %s closed the connection", session.client_address)

    # -------------------- Data connections --------------------

    def open_data_connection(self, endpoint: DataEndpoint) -> DataConnection:
        """Conexión de datos (sin abrir) hacia el endpoint negociado con PORT."""
        return DataConnection(endpoint, connect_timeout=self.settings.data_connect_timeout)


__all__ = [
    'FtpServer',
]
