"""Shared error types for the relay tunnel."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EnvelopeError(ValueError):
    """Raised when a wire message is not a valid envelope."""

    code: str
    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class RegistrationError(Exception):
    """Raised when a connection does not open with a valid register envelope."""

    reason: str

    def __str__(self) -> str:
        return self.reason


__all__ = ["EnvelopeError", "RegistrationError"]
