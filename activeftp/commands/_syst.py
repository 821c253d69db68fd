from activeftp.entities.command import Command
from activeftp.entities.client_session import ClientSession

SYSTEM_INFO = "Windows_NT"

def handle_syst(cmd: Command, session: ClientSession, server) -> tuple[int, str]:
    """Maneja comando SYST; se puede deshabilitar desde la configuración."""
    if not server.settings.allow_syst:
        return 202, "Command not implemented"
    return 215, SYSTEM_INFO
