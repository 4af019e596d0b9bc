from __future__ import annotations

RETRYABLE_STATUS_CODES = frozenset({429, 503})


class LLMBackendError(RuntimeError):
    """Failure of a single backend call, classified once at the transport boundary."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code in RETRYABLE_STATUS_CODES

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is None:
            return base
        return f"[{self.status_code}] {base}"
