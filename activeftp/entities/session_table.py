import threading

from activeftp.entities.client_session import ClientSession


class SessionTable:
    """Tabla de sesiones activas (session_id -> ClientSession), compartida
    entre el hilo de escucha y los hilos de cada cliente."""

    def __init__(self):
        self._by_id: dict[str, ClientSession] = {}
        self._lock = threading.Lock()

    def add(self, session: ClientSession) -> None:
        with self._lock:
            self._by_id[session.get_session_id()] = session

    def remove_by_id(self, session_id: str) -> None:
        with self._lock:
            self._by_id.pop(session_id, None)

    def get_all_sessions(self) -> list[ClientSession]:
        """Retorna una lista con todas las sesiones actualmente almacenadas."""
        with self._lock:
            return list(self._by_id.values())

    def snapshot(self) -> list[dict]:
        """Resumen (id, cliente, usuario logueado, cwd) de cada sesión activa."""
        return [session.describe() for session in self.get_all_sessions()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
