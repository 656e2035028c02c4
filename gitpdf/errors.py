class GitPdfError(Exception):
    """Base class for gitpdf-specific errors."""


# Filesystem / network
class StorageError(GitPdfError):
    pass


# Payload parsing
class MalformedInputError(GitPdfError):
    pass


class IntegrityError(MalformedInputError):
    """Authenticated payload failed its tag check (wrong key or tampering)."""


# Collaborators
class InvalidArchiveError(GitPdfError):
    pass


class NoAttachmentError(GitPdfError):
    pass


class BackendUnavailableError(GitPdfError):
    pass


class ConfigError(GitPdfError):
    pass


class StageError(GitPdfError):
    """A pipeline stage failed; ``cause`` holds the underlying exception."""

    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"{stage}: {cause}")
        self.stage = stage
        self.cause = cause
