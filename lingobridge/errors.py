"""Domain exceptions for endpoint and CLI diagnostics."""

from __future__ import annotations


class TranslationStageError(RuntimeError):
    """Raised when a specific translation stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
        status_code: int = 500,
        upstream_detail: str | None = None,
    ) -> None:
        """Initialize a stage-scoped error with its HTTP status mapping."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
        self.status_code = status_code
        self.upstream_detail = upstream_detail
