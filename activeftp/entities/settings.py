import json
import logging
import os
from typing import Optional

import bcrypt

logger = logging.getLogger("activeftp.settings")

DEFAULT_CONFIG_PATH = "ftp.conf"
# bcrypt solo usa los primeros 72 bytes de la contraseña
MAX_PASSWORD_BYTES = 72


class SettingsError(Exception):
    """Configuración ilegible o con tipos inválidos."""
    pass


class Settings:
    """
    Configuración del servidor FTP.

    .Campos:
        . banner : texto del saludo 220 (vacío = "Service Ready")
        . need_auth : si USER exige PASS
        . users : username -> hash bcrypt de la contraseña
        . anonymous_enabled : acepta 'anonymous' / 'ftp' con cualquier email
        . banned_emails : emails rechazados en login anónimo
        . base_directory : raíz de todo lo que se sirve
        . allow_syst : permite que SYST revele el sistema
        . data_connect_timeout : segundos para conectar la conexión de datos
    """

    _FIELDS = {
        "banner": str,
        "need_auth": bool,
        "users": dict,
        "anonymous_enabled": bool,
        "banned_emails": list,
        "base_directory": str,
        "allow_syst": bool,
        "data_connect_timeout": (int, float),
    }

    def __init__(self, banner: str = "", need_auth: bool = False, users: Optional[dict] = None,
                 anonymous_enabled: bool = False, banned_emails: Optional[list] = None,
                 base_directory: str = "FTP_DIR/", allow_syst: bool = True,
                 data_connect_timeout: float = 30.0):
        self.banner = banner
        self.need_auth = need_auth
        self.users: dict[str, str] = dict(users or {})
        self.anonymous_enabled = anonymous_enabled
        self.banned_emails: list[str] = list(banned_emails or [])
        self.base_directory = base_directory
        self.allow_syst = allow_syst
        self.data_connect_timeout = data_connect_timeout

    # -------------------- Users --------------------

    def add_user(self, username: str, password: str, rounds: int = 12) -> None:
        """Guarda (o reemplaza) un usuario con la contraseña hasheada con bcrypt."""
        if not username:
            raise SettingsError("Username cannot be empty")
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise SettingsError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
        hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds))
        self.users[username] = hashed.decode("utf-8")

    def get_password_hash(self, username: Optional[str]) -> Optional[str]:
        if username is None:
            return None
        return self.users.get(username)

    # ------------------ Serialización / Deserialización -------------------

    def to_json(self) -> dict:
        return {
            "banner": self.banner,
            "need_auth": self.need_auth,
            "users": dict(self.users),
            "anonymous_enabled": self.anonymous_enabled,
            "banned_emails": list(self.banned_emails),
            "base_directory": self.base_directory,
            "allow_syst": self.allow_syst,
            "data_connect_timeout": self.data_connect_timeout,
        }

    @classmethod
    def from_json(cls, data: dict) -> "Settings":
        """Crea Settings desde un dict; las claves ausentes toman su valor por defecto."""
        if not isinstance(data, dict):
            raise SettingsError("Configuration root must be a JSON object")

        kwargs = {}
        for key, value in data.items():
            expected = cls._FIELDS.get(key)
            if expected is None:
                logger.warning("Ignoring unknown configuration key: %s", key)
                continue
            # bool es subclase de int: no aceptarlo como timeout
            if not isinstance(value, expected) or (key == "data_connect_timeout" and isinstance(value, bool)):
                raise SettingsError(f"Invalid value for '{key}': {value!r}")
            kwargs[key] = value

        return cls(**kwargs)

    @classmethod
    def load(cls, path: str = DEFAULT_CONFIG_PATH) -> "Settings":
        """Lee la configuración de `path`. Si el archivo no existe usa los valores por defecto."""
        if not os.path.exists(path):
            logger.info("Configuration file %s not found, using defaults", path)
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SettingsError(f"Unable to read configuration file {path}: {e}") from e

        return cls.from_json(data)

    def save(self, path: str = DEFAULT_CONFIG_PATH) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_json(), f, indent=2)
        logger.info("Configuration saved to %s", path)
