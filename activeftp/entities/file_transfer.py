import logging
from enum import Enum
from typing import Iterable

from activeftp.entities.data_connection import DataConnection

logger = logging.getLogger("activeftp.file_transfer")

CHUNK_SIZE = 65536
CRLF = "\r\n"

STORAGE_ERROR_REPLY = (452, "Requested action not taken. Insufficient storage space in system. File unavailable")
ABORTED_REPLY = (426, "Connection closed; transfer aborted")


class TransferType(Enum):
    BINARY = "I"
    TEXT = "A"


class TransferError(Exception):
    """Fallo durante una transferencia, con su respuesta FTP."""

    def __init__(self, code: int, message: str):
        super().__init__(f"{code} {message}")
        self.code = code
        self.message = message

    def reply(self) -> tuple[int, str]:
        return self.code, self.message


def _transfer_failed(error: Exception) -> TransferError:
    """452 para errores de E/S (lectura del archivo o escritura del socket), 426 para el resto."""
    if isinstance(error, OSError):
        return TransferError(*STORAGE_ERROR_REPLY)
    return TransferError(*ABORTED_REPLY)


def read_chunks(real_path: str, chunk_size: int = CHUNK_SIZE):
    """Generador que lee un archivo en chunks binarios."""
    with open(real_path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            yield chunk


def read_text_lines(real_path: str, encoding: str = "utf-8"):
    """Generador de líneas con terminación CRLF (la última sin terminar queda igual)."""
    with open(real_path, "r", encoding=encoding, newline=None) as f:
        for line in f:
            if line.endswith("\n"):
                yield line[:-1] + CRLF
            else:
                yield line


def send_file(real_path: str, conn: DataConnection, transfer_type: TransferType) -> int:
    """
    Envía el archivo por la conexión de datos según el tipo de transferencia.

    - BINARY: los bytes tal cual, en chunks.
    - TEXT: línea a línea con el fin de línea de la red (CRLF).

    Retorna los bytes enviados. Lanza TransferError con el código a responder.
    """
    bytes_sent = 0

    try:
        if transfer_type is TransferType.BINARY:
            for chunk in read_chunks(real_path):
                conn.sendall(chunk)
                bytes_sent += len(chunk)
        else:
            for line in read_text_lines(real_path):
                data = line.encode("utf-8")
                conn.sendall(data)
                bytes_sent += len(data)

    except Exception as e:
        logger.warning("Transfer of %s aborted after %d bytes: %s", real_path, bytes_sent, e)
        raise _transfer_failed(e) from e

    logger.info("Sent %s (%d bytes, type %s)", real_path, bytes_sent, transfer_type.value)
    return bytes_sent


def send_lines(lines: Iterable[str], conn: DataConnection) -> int:
    """Envía un listado, una línea CRLF por entrada."""
    bytes_sent = 0

    try:
        for line in lines:
            data = f"{line}{CRLF}".encode("utf-8")
            conn.sendall(data)
            bytes_sent += len(data)

    except Exception as e:
        logger.warning("Listing transfer aborted after %d bytes: %s", bytes_sent, e)
        raise _transfer_failed(e) from e

    return bytes_sent
