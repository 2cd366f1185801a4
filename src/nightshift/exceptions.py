"""Custom exceptions for Nightshift."""


class PlanError(Exception):
    """Raised when a section plan is inconsistent."""

    def __init__(self, message: str, key: str):
        """Initialize the error."""
        self.key = key
        super().__init__(message)


class CompletionError(Exception):
    """Raised when the completion service cannot produce a reply."""


class SessionBusyError(Exception):
    """Raised when a message is sent while a reply is still being generated."""


class ProjectNotFoundError(Exception):
    """Raised when a project has no design document on disk."""

    def __init__(self, project_name: str):
        """Initialize the error."""
        self.project_name = project_name
        super().__init__(
            f"Project '{project_name}' not found. Run 'nightshift init {project_name}' first."
        )
