import logging
from activeftp.entities.command import Command
from activeftp.entities.client_session import ClientSession
from activeftp.entities.data_connection import DataConnectionError
from activeftp.entities.file_system_manager import SecurityError, has_parent_segment
from activeftp.entities.file_transfer import ABORTED_REPLY, TransferError, send_file

logger = logging.getLogger("activeftp.handlers.retr")

FILE_NOT_FOUND = (550, "File Not Found")
TRANSFER_OK = (226, "Closing data connection. Requested file action successful")

def handle_retr(cmd: Command, session: ClientSession, server) -> tuple[int, str]:
    """Maneja comando RETR - descarga de archivo por la conexión de datos (modo activo)."""

    # 1. Validación de argumentos
    filename = cmd.get_arg()
    if not filename:
        return 501, "Syntax error in parameters or arguments"

    if has_parent_segment(filename):
        logger.warning("Rejected RETR with parent segment from %s: %r", session.client_address, filename)
        return FILE_NOT_FOUND

    # 2. Resolución segura de la ruta
    try:
        virtual_path, real_path = server.fs.validate_path(session.get_cwd(), filename, want="file")
    except (SecurityError, OSError, ValueError) as e:
        logger.info("RETR %r failed for %s: %s", filename, session.client_address, e)
        return FILE_NOT_FOUND

    # 3. A partir del 150 la transferencia se intenta sí o sí
    session.send_response(150, "File status okay; about to open data connection")

    # sin PORT previo no hay a quién enviar el archivo
    endpoint = session.consume_data_endpoint()
    if endpoint is None:
        logger.info("RETR %s without data endpoint from %s, nothing sent", virtual_path, session.client_address)
        return TRANSFER_OK

    try:
        with server.open_data_connection(endpoint) as conn:
            send_file(real_path, conn, session.get_transfer_type())
    except DataConnectionError:
        return ABORTED_REPLY
    except TransferError as e:
        return e.reply()

    logger.info("RETR successful: %s -> %s", virtual_path, endpoint)
    return TRANSFER_OK
