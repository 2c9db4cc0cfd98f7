"""
Receipt model — the outcome of one version-control primitive.

Adapters return receipts instead of raising. The workflows inspect
``ok`` / ``failed`` and decide whether a failure is fatal.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Receipt(BaseModel):
    """Result of a single adapter call.

    ``output`` carries the primitive's payload decoded for display and
    emptiness checks, ``data`` the same payload as raw bytes (what a
    patch file must contain), ``error`` the tool's stderr when it failed.
    """

    adapter: str
    operation: str
    target: str = ""
    status: Literal["ok", "failed"] = "ok"

    duration_ms: int = 0
    output: str = ""
    data: bytes = b""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the call succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the call failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        adapter: str,
        operation: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            operation=operation,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        operation: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            operation=operation,
            status="failed",
            error=error,
            **kwargs,
        )
