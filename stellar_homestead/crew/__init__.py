"""
Stellar Homestead — Crew Module
Colonist labor, rest, and health.
"""

from .colonist import (
    Colonist,
    Specialization,
    initial_roster,
    first_with_specialization,
)

__all__ = [
    "Colonist",
    "Specialization",
    "initial_roster",
    "first_with_specialization",
]
