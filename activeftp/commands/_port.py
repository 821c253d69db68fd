import logging
from activeftp.entities.command import Command
from activeftp.entities.client_session import ClientSession
from activeftp.entities.data_connection import parse_port_argument

logger = logging.getLogger("activeftp.handlers.port")

def handle_port(cmd: Command, session: ClientSession, server) -> tuple[int, str]:
    """Maneja PORT h1,h2,h3,h4,p1,p2: guarda el endpoint para la próxima transferencia."""
    try:
        endpoint = parse_port_argument(cmd.get_arg())
    except ValueError as e:
        logger.info("Rejected PORT %r from %s: %s", cmd.get_arg(), session.client_address, e)
        return 501, "Syntax error in parameters or arguments"

    session.enter_active_mode(endpoint)
    return 200, "OK"
