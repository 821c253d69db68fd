from activeftp.entities.command import Command
from activeftp.entities.client_session import ClientSession

def handle_pwd(cmd: Command, session: ClientSession, server) -> tuple[int, str]:
    """Maneja comando PWD - Print Working Directory"""
    cwd = session.get_cwd().rstrip("/")
    return 257, f'"{cwd}/" is current directory'
