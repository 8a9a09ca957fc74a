class ReconciliationError(Exception):
    """Base error for a tag release run.

    ``phase`` is either ``git`` or ``registry``; ``repository`` names the git
    or registry repository the failure belongs to.
    """

    def __init__(self, message: str, *, phase: str | None = None, repository: str | None = None):
        super().__init__(message)
        self.message: str = message
        self.phase: str | None = phase
        self.repository: str | None = repository

    def __str__(self) -> str:
        context = " ".join(part for part in (self.phase, self.repository) if part)
        if context:
            return f"[{context}] {self.message}"
        return self.message


class ReferenceNotFoundError(ReconciliationError):
    pass


class ConflictMismatchError(ReconciliationError):
    """The commit being released disagrees with what git or the registry holds."""


class ReferenceMismatchError(ConflictMismatchError):
    pass


class ImageMismatchError(ConflictMismatchError):
    pass


class TransportError(ReconciliationError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        phase: str | None = None,
        repository: str | None = None,
    ):
        super().__init__(message, phase=phase, repository=repository)
        self.status_code: int | None = status_code


class WaitTimeoutError(ReconciliationError):
    pass


class ReconciliationCancelledError(ReconciliationError):
    pass
