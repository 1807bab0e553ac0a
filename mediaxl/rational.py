"""Rational numbers used for edit, grain and sample rates."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Rational:
    """A ratio of two integers; equality compares by cross multiplication."""

    numerator: int
    denominator: int

    def is_valid(self) -> bool:
        """Return whether the denominator is non-zero."""
        return self.denominator != 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rational):
            return NotImplemented
        return self.numerator * other.denominator == self.denominator * other.numerator

    # Cross-multiplication equality is not transitive for zero denominators.
    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"