import logging
from typing import Optional

import bcrypt

from activeftp.entities.settings import MAX_PASSWORD_BYTES, Settings

logger = logging.getLogger("activeftp.user_manager")

ANONYMOUS_USERNAMES = ("anonymous", "ftp")


def is_anonymous(settings: Settings, username: Optional[str]) -> bool:
    """True si el login anónimo está habilitado y `username` es uno de sus alias."""
    return settings.anonymous_enabled and username in ANONYMOUS_USERNAMES


def validate_password(settings: Settings, username: Optional[str], password: str) -> bool:
    """Valida la contraseña de un usuario contra su hash bcrypt."""
    hashed = settings.get_password_hash(username)
    if not hashed:
        return False

    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        logger.info("Rejected password longer than %d bytes for %s", MAX_PASSWORD_BYTES, username)
        return False

    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError as e:
        logger.error("Stored password hash for %s is invalid: %s", username, e)
        return False


def check_credentials(settings: Settings, username: Optional[str], password: Optional[str]) -> bool:
    """
    Resultado único de la comprobación de credenciales.

    Usuario desconocido, contraseña incorrecta o email anónimo vetado
    devuelven lo mismo: False, sin distinguir la causa.
    """
    password = password or ""

    if is_anonymous(settings, username):
        banned = {email.lower() for email in settings.banned_emails}
        return password.lower() not in banned

    return validate_password(settings, username, password)
