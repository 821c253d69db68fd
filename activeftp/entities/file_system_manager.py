import os
import posixpath
import stat
import time

try:
    import pwd
except ImportError:  # Windows
    pwd = None

DIRECTORY_SIZE_PLACEHOLDER = "999"
PERMISSIONS_PLACEHOLDER = "-" * 9
LISTING_DATE_FORMAT = "%b %d %H:%M"


class SecurityError(Exception):
    """Excepción para errores de seguridad (path traversal, escapes, etc.)."""
    pass


def has_parent_segment(path: str) -> bool:
    """True si algún segmento del path (separado por '/' o '\\') es '..'."""
    return ".." in path.replace("\\", "/").split("/")


class FileSystemManager:
    """
    Acceso de solo lectura al árbol servido.

    Contrato:
    - Todas las rutas externas son virtuales POSIX ('/' es el directorio base)
    - Todas las validaciones de seguridad ocurren aquí
    - Éxito = no excepción
    - Fallo = excepción semántica clara (SecurityError, FileNotFoundError, ...)
    """

    def __init__(self, base_directory: str):
        self.root_dir = os.path.abspath(base_directory)
        os.makedirs(self.root_dir, exist_ok=True)

    # --------------------------- Path utils ---------------------------

    def normalize_virtual_path(self, cwd: str, path: str) -> str:
        """Normaliza un path virtual POSIX según el directorio actual (cwd)."""
        path = path.replace("\\", "/")
        if path.startswith("/"):
            return posixpath.normpath(path)
        return posixpath.normpath(posixpath.join(cwd, path))

    def virtual_to_real_path(self, virtual_path: str) -> str:
        """Convierte un path virtual POSIX a un path real en el filesystem."""
        clean = virtual_path.lstrip("/")
        return os.path.normpath(os.path.join(self.root_dir, clean))

    def _check_path_within_root(self, real_path: str) -> None:
        """Lanza SecurityError si el path real está fuera del root."""
        root_real = os.path.realpath(self.root_dir)
        path_real = os.path.realpath(real_path)

        try:
            common = os.path.commonpath([root_real, path_real])
        except ValueError:
            raise SecurityError("Path traversal attempt detected")

        if common != root_real:
            raise SecurityError("Path traversal attempt detected")

    def resolve_and_secure_path(self, cwd: str, path: str) -> tuple[str, str]:
        """Retorna (virtual_path, real_path) validando seguridad."""
        virtual = self.normalize_virtual_path(cwd, path)
        # normpath conserva '//' inicial en POSIX
        if virtual.startswith("//"):
            virtual = "/" + virtual.lstrip("/")
        real = self.virtual_to_real_path(virtual)
        self._check_path_within_root(real)
        return virtual, real

    # --------------------------- Validation ---------------------------

    def validate_path(self, cwd: str, path: str, want: str = "any") -> tuple[str, str]:
        """
        Valida la existencia y tipo del path.
        want = "any" | "file" | "dir"
        Retorna (virtual_path, real_path) si válido.
        """
        virtual, real = self.resolve_and_secure_path(cwd, path)

        if not os.path.exists(real):
            raise FileNotFoundError("Path not found")

        if want == "any":
            return virtual, real
        if want == "file":
            if os.path.isfile(real):
                return virtual, real
            raise IsADirectoryError("Not a file")
        if want == "dir":
            if os.path.isdir(real):
                return virtual, real
            raise NotADirectoryError("Not a directory")

        raise ValueError(f"Invalid want parameter: {want}")

    # --------------------------- Listing ---------------------------

    def list_entries(self, cwd: str, path: str = ".") -> list[str]:
        """
        Devuelve las líneas del listado LIST para `path`.

        Directorio: primero subdirectorios y luego archivos, cada grupo en el
        orden que entrega el filesystem. Archivo: una sola línea.
        """
        _, real = self.validate_path(cwd, path)

        if not os.path.isdir(real):
            return [format_listing_line(real, os.stat(real), is_dir=False)]

        directories = []
        files = []
        with os.scandir(real) as it:
            for entry in it:
                try:
                    st = entry.stat()
                    is_dir = entry.is_dir()
                except OSError:
                    # enlace roto o entrada que desapareció
                    continue

                line = format_listing_line(entry.path, st, is_dir=is_dir)
                (directories if is_dir else files).append(line)

        return directories + files


def owner_name(st: os.stat_result) -> str:
    """Nombre del propietario; uid numérico si no se puede resolver."""
    uid = getattr(st, "st_uid", None)
    if uid is None:
        return "owner"
    if pwd is not None:
        try:
            return pwd.getpwuid(uid).pw_name
        except KeyError:
            pass
    return str(uid)


def creation_time(st: os.stat_result) -> float:
    return getattr(st, "st_birthtime", st.st_ctime)


def format_listing_line(real_path: str, st: os.stat_result, is_dir: bool) -> str:
    """
    Línea estilo `ls -l`:
    tipo + permisos (placeholder) + máscara de derechos + propietario + tamaño + fecha de creación + nombre
    """
    type_indicator = "d" if is_dir else "-"
    rights = stat.S_IMODE(st.st_mode) if st.st_mode else 0
    size = DIRECTORY_SIZE_PLACEHOLDER if is_dir else str(st.st_size)
    created = time.strftime(LISTING_DATE_FORMAT, time.localtime(creation_time(st)))
    name = os.path.basename(os.path.normpath(real_path))
    if is_dir:
        name += "/"

    return f"{type_indicator}{PERMISSIONS_PLACEHOLDER} {rights} {owner_name(st)} {size} {created} {name}"
