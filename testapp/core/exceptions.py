"""Exceptions raised by the probe framework."""


class TestAppException(Exception):
    """Base class for all test application errors."""

    __test__ = False  # not a pytest test class


class ProbeConfigurationError(TestAppException):
    """Required configuration for a probe is missing or invalid."""

    pass


class ProbeInitError(TestAppException):
    """A probe could not be initialized."""

    def __init__(self, probe: str, cause: BaseException) -> None:
        self.probe = probe
        self.cause = cause
        super().__init__(f"{probe}: init failed: {cause}")


class ProbeOperationError(TestAppException):
    """A read, write or connect against a backend failed during a test."""

    def __init__(self, probe: str, operation: str, cause: BaseException | str) -> None:
        self.probe = probe
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation}: {cause}")


class RetryError(TestAppException):
    """The retry controller stopped without a successful attempt."""

    def __init__(self, message: str, last_error: BaseException | None) -> None:
        self.last_error = last_error
        super().__init__(message)


class RetryTimeoutError(RetryError):
    """The retry budget was exhausted."""

    pass


class RetryCancelledError(RetryError):
    """Retrying was abandoned because shutdown was requested."""

    pass


class UnexpectedRowCountError(TestAppException):
    """A read expected exactly one row and found a different number."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"expected exactly 1 row, got {count}")
