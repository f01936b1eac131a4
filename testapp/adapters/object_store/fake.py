"""Fake ObjectStore for testing.

Keeps objects in a dict and lets tests inject failures per method.
"""

from typing import Optional


class FakeObjectStore:
    """In-memory ObjectStore.

    Usage:
        store = FakeObjectStore()
        store.set_error("write", ConnectionError("refused"))
    """

    def __init__(self, bucket: str = "test-bucket") -> None:
        self._bucket = bucket
        self.objects: dict[str, bytes] = {}
        self.calls: list[tuple[str, ...]] = []
        self.closed = False
        self._errors: dict[str, Exception] = {}
        self._read_override: Optional[bytes] = None

    @property
    def bucket(self) -> str:
        return self._bucket

    def _maybe_raise(self, method: str) -> None:
        error = self._errors.get(method)
        if error is not None:
            raise error

    async def check(self) -> None:
        self.calls.append(("check",))
        self._maybe_raise("check")

    async def write(self, key: str, data: bytes) -> None:
        self.calls.append(("write", key))
        self._maybe_raise("write")
        self.objects[key] = data

    async def read(self, key: str) -> bytes:
        self.calls.append(("read", key))
        self._maybe_raise("read")
        if self._read_override is not None:
            return self._read_override
        if key not in self.objects:
            raise FileNotFoundError(f"object not found: {key}")
        return self.objects[key]

    async def close(self) -> None:
        self.calls.append(("close",))
        self._maybe_raise("close")
        self.closed = True

    # -- test helpers --

    def set_error(self, method: str, error: Exception) -> None:
        """Make ``method`` raise ``error`` on every call."""
        self._errors[method] = error

    def set_read_override(self, data: bytes) -> None:
        """Make ``read`` return ``data`` regardless of what was written."""
        self._read_override = data

    def clear(self) -> None:
        """Reset all recorded state."""
        self.objects.clear()
        self.calls.clear()
        self.closed = False
        self._errors.clear()
        self._read_override = None
