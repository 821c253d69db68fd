import logging
from activeftp.entities.command import Command
from activeftp.entities.client_session import ClientSession
from activeftp.entities.data_connection import DataConnectionError
from activeftp.entities.file_system_manager import SecurityError
from activeftp.entities.file_transfer import ABORTED_REPLY, TransferError, send_lines

logger = logging.getLogger("activeftp.handlers.list")

def strip_ls_options(arg: str) -> str:
    """Descarta opciones estilo `ls` (p.ej. "-la") que algunos clientes envían antes del path."""
    while arg.startswith("-"):
        _, _, arg = arg.partition(" ")
    return arg

def handle_list(cmd: Command, session: ClientSession, server) -> tuple[int, str]:
    """
    LIST [<path>]: lista un directorio (o un archivo) relativo al cwd.
    Sin PORT previo no se abre conexión de datos, solo se responde 226.
    """
    path = strip_ls_options(cmd.get_arg() or "") or "."

    # 1. Generar el listado ANTES de abrir la conexión de datos
    try:
        lines = server.fs.list_entries(session.get_cwd(), path)
    except (SecurityError, OSError, ValueError) as e:
        logger.info("LIST %r failed for %s: %s", path, session.client_address, e)
        return 550, "Requested action not taken. File unavailable"

    # 2. Sin endpoint negociado no hay a dónde enviar
    endpoint = session.consume_data_endpoint()
    if endpoint is None:
        return 226, "Transfer complete"

    # 3. Enviar listado por la conexión de datos
    session.send_response(150, "Here comes the directory listing")
    try:
        with server.open_data_connection(endpoint) as conn:
            send_lines(lines, conn)
    except DataConnectionError:
        return ABORTED_REPLY
    except TransferError as e:
        return e.reply()

    logger.info("Directory listing of %r sent to %s (%d entries)", path, endpoint, len(lines))
    return 226, "Transfer complete"
