from __future__ import annotations

__all__ = [
    "ArchiveError",
    "BaseError",
    "BadRequestError",
    "ContainerEngineError",
    "CredentialEncodingError",
    "DeadlineExceededError",
    "EngineCallError",
    "EngineReportedError",
    "LoadError",
    "NotFoundError",
    "NotSupportedError",
    "StreamDecodeError",
    "StreamReadError",
    "StreamReleaseError",
    "UnsupportedEngineError",
]


class BaseError(Exception):
    status_code: int


class BadRequestError(BaseError):
    status_code = 400


class NotFoundError(BaseError):
    status_code = 404


class NotSupportedError(BaseError):
    status_code = 415


class LoadError(Exception):
    status_code = 500


class UnsupportedEngineError(NotSupportedError):
    """Raised when a container engine backend cannot be constructed.

    Attributes:
        engine: Normalized identifier of the rejected backend.
    """

    def __init__(self, engine: str, message: str | None = None):
        self.engine = engine
        super().__init__(message or f"{engine} is not supported yet")


class ContainerEngineError(BaseError):
    """Base class for failures talking to the container engine.

    Attributes:
        operation: Engine operation (build, tag or push).
        target: Image name or destination the operation acted on.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        target: str | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.target = target

    def with_context(
        self,
        message: str,
        operation: str,
        target: str,
    ) -> ContainerEngineError:
        """Copy of this error, same type, with operation context."""
        error = type(self).__new__(type(self))
        error.__dict__.update(self.__dict__)
        error.args = (f"{message} ({self})",)
        error.operation = operation
        error.target = target
        return error


class ArchiveError(ContainerEngineError):
    status_code = 400


class EngineCallError(ContainerEngineError):
    status_code = 502


class DeadlineExceededError(ContainerEngineError):
    status_code = 504


class StreamDecodeError(ContainerEngineError):
    status_code = 502

    def __init__(self, message: str, line: str, **kwargs):
        super().__init__(message, **kwargs)
        self.line = line


class EngineReportedError(ContainerEngineError):
    status_code = 500

    def __init__(self, message: str, detail: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.detail = detail


class StreamReadError(ContainerEngineError):
    status_code = 502


class StreamReleaseError(ContainerEngineError):
    status_code = 500


class CredentialEncodingError(ContainerEngineError):
    status_code = 400
