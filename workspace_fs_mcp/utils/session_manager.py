from workspace_fs_mcp.models.session import WorkspaceSession


class SessionManager:
    """Manages workspace sessions for all clients."""

    def __init__(self) -> None:
        # Simple dict as an in-process session storage.
        self._storage: dict[str, WorkspaceSession] = {}

    def get_session(self, session_id: str = "default") -> WorkspaceSession:
        """Returns or creates the session for a given id."""
        if session_id not in self._storage:
            self._storage[session_id] = WorkspaceSession()
        return self._storage[session_id]
