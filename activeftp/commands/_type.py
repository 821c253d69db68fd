from activeftp.entities.command import Command
from activeftp.entities.client_session import ClientSession
from activeftp.entities.file_transfer import TransferType

TRANSFER_TYPES = {
    "I": TransferType.BINARY,
    "A": TransferType.TEXT,
}

def handle_type(cmd: Command, session: ClientSession, server) -> tuple[int, str]:
    """
    Maneja el comando TYPE.
    Solo 'I' (binario) y 'A' (texto), sensible a mayúsculas.
    """
    transfer_type = TRANSFER_TYPES.get(cmd.get_arg())

    if transfer_type is None:
        return 504, "Command not implemented for that parameter"

    session.set_transfer_type(transfer_type)
    return 200, "OK"
