"""
Tagged parse results.

Parsed[T] is either ok (carrying a value) or failed (carrying a reason).
Every stage of the model-output recovery chain returns one, so the chain
reads as an explicit sequence of variants instead of nested try/except.

Dependencies: None
System role: Result type for model-output parsing
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """Outcome of one parsing attempt."""

    is_ok: bool
    value: T | None = None
    reason: str = ""
    stage: str = ""

    @classmethod
    def ok(cls, value: T, stage: str = "") -> "Parsed[T]":
        return cls(is_ok=True, value=value, stage=stage)

    @classmethod
    def fail(cls, reason: str, stage: str = "") -> "Parsed[T]":
        return cls(is_ok=False, reason=reason, stage=stage)

    def map(self, func: Callable[[T], U]) -> "Parsed[U]":
        """Apply func to the value of an ok result; failures pass through."""
        if not self.is_ok:
            return Parsed(is_ok=False, reason=self.reason, stage=self.stage)
        return Parsed(is_ok=True, value=func(self.value), stage=self.stage)

    def unwrap_or(self, default: T) -> T:
        """Value of an ok result, default otherwise."""
        return self.value if self.is_ok else default


def first_ok(attempts: list[Callable[[], "Parsed[T]"]]) -> tuple["Parsed[T]", list[str]]:
    """
    Run parse attempts in order until one succeeds.

    Args:
        attempts: Zero-argument callables, each producing a Parsed result

    Returns:
        tuple: The first ok result (or the last failure) and the reasons
        collected from every failed attempt before it
    """
    reasons: list[str] = []
    result: Parsed[T] = Parsed.fail("no parse attempts")
    for attempt in attempts:
        result = attempt()
        if result.is_ok:
            return result, reasons
        reasons.append(f"{result.stage}: {result.reason}" if result.stage else result.reason)
    return result, reasons
