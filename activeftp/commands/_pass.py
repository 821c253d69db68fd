import logging
from activeftp.entities.command import Command
from activeftp.entities.client_session import ClientSession
from activeftp.entities.user_manager import check_credentials

logger = logging.getLogger("activeftp.handlers.pass")

INVALID_CREDENTIALS = (430, "Invalid username or password")

def handle_pass(cmd: Command, session: ClientSession, server) -> tuple[int, str]:
    """
    Maneja el comando PASS <password>.
    - Compara contra la credencial del último USER.
    - Usuario desconocido y contraseña incorrecta dan la misma respuesta.
    """
    username = session.get_username()

    if not check_credentials(server.settings, username, cmd.get_arg()):
        logger.info("Login failed for %r from %s", username, session.client_address)
        return INVALID_CREDENTIALS

    session.authenticate()
    return 230, "User logged in"
