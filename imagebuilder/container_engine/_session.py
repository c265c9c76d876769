from __future__ import annotations

__all__ = ["Session"]

import time
from typing import Any, Callable, Iterable, Iterator

from imagebuilder.core.exceptions import DeadlineExceededError


class Session:
    """Engine client scoped to one operation, with a fixed deadline.

    The client is created on first use with the deadline as its
    request timeout and closed on exit, whatever the outcome.
    """

    _client: Any

    def __init__(
        self,
        client_factory: Callable[[int], Any],
        deadline: int,
        operation: str,
        target: str,
    ):
        self.client_factory = client_factory
        self.deadline = deadline
        self.operation = operation
        self.target = target
        self._expires_at = 0.0
        self._client = None

    def __enter__(self) -> Session:
        self._expires_at = time.monotonic() + self.deadline
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self.client_factory(self.deadline)
        return self._client

    def expired(self) -> bool:
        return time.monotonic() >= self._expires_at

    def check(self) -> None:
        if self.expired():
            raise DeadlineExceededError(
                f"{self.operation} of {self.target} exceeded "
                f"{self.deadline}s deadline",
                operation=self.operation,
                target=self.target,
            )

    def watch(self, stream: Iterable[bytes]) -> Iterator[bytes]:
        for chunk in stream:
            self.check()
            yield chunk
