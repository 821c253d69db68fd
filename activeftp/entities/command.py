from enum import Enum
from typing import Optional


class Verb(Enum):
    USER = "USER"
    PASS = "PASS"
    PWD = "PWD"
    SYST = "SYST"
    TYPE = "TYPE"
    PORT = "PORT"
    LIST = "LIST"
    RETR = "RETR"
    UNKNOWN = ""

    @classmethod
    def from_name(cls, name: str) -> "Verb":
        """Devuelve el Verb para `name` (sensible a mayúsculas) o UNKNOWN."""
        if not name:
            return cls.UNKNOWN
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


class Command:
    """
    Comando recibido por la conexión de control.

    La línea se divide solo en el primer espacio: lo que sigue es un único
    argumento y se conserva literal (no se vuelve a dividir ni se recorta).
    """

    def __init__(self, raw_command: str):
        self.raw_command = raw_command
        self.parse_command()

    def parse_command(self):
        name, sep, rest = self.raw_command.partition(" ")
        self.name = name
        self.arg: Optional[str] = rest if sep else None
        self.verb = Verb.from_name(name)

    def __str__(self):
        if self.verb is Verb.PASS and self.arg is not None:
            return f"Command(name='{self.name}', arg='***')"
        return f"Command(name='{self.name}', arg={self.arg!r})"

    def get_name(self) -> str:
        return self.name

    def get_arg(self, default=None):
        """Devuelve el argumento o `default` si la línea no tenía."""
        return self.arg if self.arg is not None else default
