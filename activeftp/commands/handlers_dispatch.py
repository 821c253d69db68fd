from activeftp.commands import *
from activeftp.entities.command import Verb

NOT_IMPLEMENTED = (202, "Command not implemented")


def handle_unknown(cmd, session, server) -> tuple[int, str]:
    """Verbo vacío o desconocido."""
    return NOT_IMPLEMENTED


# Diccionario de handlers
FTP_COMMAND_HANDLERS = {
    Verb.USER: handle_user,
    Verb.PASS: handle_pass,
    Verb.PWD: handle_pwd,
    Verb.SYST: handle_syst,
    Verb.TYPE: handle_type,
    Verb.PORT: handle_port,
    Verb.LIST: handle_list,
    Verb.RETR: handle_retr,
    Verb.UNKNOWN: handle_unknown,
}


def get_handler(verb: Verb):
    return FTP_COMMAND_HANDLERS[verb]
