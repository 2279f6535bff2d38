"""Type definitions, result dataclasses and error classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class RootsResult:
    """Result of isolating the roots of a polynomial."""

    ok: bool
    count: int | None = None
    exact: list[str] | None = None
    approx: list[str] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict = {"ok": self.ok}
        if self.count is not None:
            result_dict["count"] = self.count
        if self.exact is not None:
            result_dict["exact"] = self.exact
        if self.approx is not None:
            result_dict["approx"] = self.approx
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return f"RootsResult(ok=False, error={self.error!r})"
        parts = [f"ok={self.ok}", f"count={self.count!r}"]
        if self.approx is not None:
            parts.append(f"approx={self.approx!r}")
        return f"RootsResult({', '.join(parts)})"


@dataclass
class CountResult:
    """Result of counting complex roots inside a rectangle."""

    ok: bool
    count: int | None = None
    on_boundary: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict = {"ok": self.ok, "on_boundary": self.on_boundary}
        if self.count is not None:
            result_dict["count"] = self.count
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return f"CountResult(ok=False, error={self.error!r})"
        return f"CountResult(ok=True, count={self.count!r}, on_boundary={self.on_boundary!r})"


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ParseError(Exception):
    """Raised when parsing fails."""

    def __init__(self, message: str, code: str = "PARSE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class DivideByZeroError(ZeroDivisionError):
    """Raised when inverting or dividing by the zero algebraic number."""

    def __init__(self, message: str = "division by zero", code: str = "DIVIDE_BY_ZERO"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class SeparationError(Exception):
    """Raised when two root sets share a root and cannot be interleaved."""

    def __init__(self, message: str, code: str = "SHARED_ROOT"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InvariantError(Exception):
    """Raised when an internal invariant is violated (a programming error)."""

    def __init__(self, message: str, code: str = "INVARIANT_VIOLATION"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
