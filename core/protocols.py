"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, ConsoleLogger)."""

    def log_forward(
        self,
        method: str,
        target_url: str,
        status: int,
        *,
        final_url: str,
        size: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None: ...
    def log_rejected(self, method: str, status: int, message: str) -> None: ...
    def log_error(self, target_url: str, status: int, message: str) -> None: ...
