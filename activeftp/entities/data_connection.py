import ipaddress
import logging
import socket
from typing import NamedTuple, Optional

logger = logging.getLogger("activeftp.data_connection")


class DataConnectionError(Exception):
    """No se pudo establecer la conexión de datos con el cliente."""
    pass


class DataEndpoint(NamedTuple):
    host: str
    port: int

    def __str__(self):
        return f"{self.host}:{self.port}"


def parse_port_argument(arg: Optional[str]) -> DataEndpoint:
    """
    Decodifica el argumento de PORT: 'h1,h2,h3,h4,p1,p2'.

    Los cuatro primeros octetos forman la IPv4 y el puerto es p1*256 + p2.
    Lanza ValueError ante cualquier error de formato.
    """
    if not arg:
        raise ValueError("Missing PORT argument")

    parts = arg.split(",")
    if len(parts) != 6:
        raise ValueError(f"Expected 6 comma-separated values, got {len(parts)}")

    octets = []
    for part in parts:
        part = part.strip()
        if not part.isdigit() or not part.isascii():
            raise ValueError(f"Invalid PORT value: {part!r}")
        value = int(part)
        if value > 255:
            raise ValueError(f"PORT value out of range: {value}")
        octets.append(value)

    host = str(ipaddress.IPv4Address(".".join(str(o) for o in octets[:4])))
    port = octets[4] * 256 + octets[5]
    return DataEndpoint(host, port)


class DataConnection:
    """
    Conexión de datos saliente (modo activo) para una única transferencia.

    El servidor conecta al listener anunciado por el cliente. Se usa como
    context manager y siempre se cierra al salir, haya error o no.
    """

    def __init__(self, endpoint: DataEndpoint, connect_timeout: Optional[float] = None):
        self.endpoint = endpoint
        self.connect_timeout = connect_timeout
        self.sock: Optional[socket.socket] = None

    def open(self) -> socket.socket:
        try:
            self.sock = socket.create_connection((self.endpoint.host, self.endpoint.port), timeout=self.connect_timeout)
        except OSError as e:
            logger.warning("Unable to open data connection to %s: %s", self.endpoint, e)
            raise DataConnectionError(f"Can't open data connection to {self.endpoint}") from e

        # La transferencia en sí no tiene timeout
        self.sock.settimeout(None)
        logger.info("Data connection established with %s", self.endpoint)
        return self.sock

    def sendall(self, data: bytes) -> None:
        if self.sock is None:
            raise DataConnectionError("Data connection is not open")
        self.sock.sendall(data)

    def close(self) -> None:
        if self.sock is None:
            return

        try:
            self.sock.shutdown(socket.SHUT_WR)
        except OSError:
            # el cliente ya cerró su extremo
            pass

        try:
            self.sock.close()
            logger.info("Data connection with %s closed", self.endpoint)
        finally:
            self.sock = None

    def __enter__(self) -> "DataConnection":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
