"""
Engine errors.

Recoverable errors (ValidationError, CombatError) are raised before any
state is derived, so the caller's state is always left as it was.
StateIntegrityError signals a broken invariant and is never caught inside
the engine.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, rule: str | None = None):
        self.message = message
        self.rule = rule
        super().__init__(message)


class ValidationError(GameError):
    """Action is illegal for the current phase, side, zone or resources."""


class CombatError(GameError):
    """Attacker or blocker is not eligible."""


class StateIntegrityError(GameError):
    """A game state invariant is violated. Treat as a defect."""

    def __init__(self, violations: list[str]):
        self.violations = violations
        super().__init__(
            f"State integrity check failed with {len(violations)} violation(s): "
            + "; ".join(violations),
            rule="STATE_INTEGRITY",
        )
