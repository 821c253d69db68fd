import logging
from activeftp.entities.command import Command
from activeftp.entities.client_session import ClientSession
from activeftp.entities.user_manager import is_anonymous

logger = logging.getLogger("activeftp.handlers.user")

def handle_user(cmd: Command, session: ClientSession, server) -> tuple[int, str]:
    """
    Maneja el comando USER <username>.
    Solo registra la identidad y decide si hará falta PASS; no verifica nada.
    """
    username = cmd.get_arg()
    settings = server.settings

    if is_anonymous(settings, username):
        session.change_user(username, need_password=True)
        return 331, "Anonymous login okay, send your complete email address as your password"

    if settings.need_auth:
        session.change_user(username, need_password=True)
        return 331, "Username ok, need password"

    session.change_user(username, need_password=False)
    return 230, "User logged in"
