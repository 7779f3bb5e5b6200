"""Reservation status transition helpers."""

from __future__ import annotations

from datetime import datetime

from tablebook.models.reservation import Reservation
from tablebook.services.errors import InvalidTransition

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"seated", "cancelled", "no_show"},
    "seated": {"completed"},
    "completed": set(),
    "cancelled": set(),
    "no_show": set(),
}


def can_transition(current: str, new: str) -> bool:
    """Return whether reservation can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def set_status(reservation: Reservation, new_status: str, now: datetime) -> None:
    """Set status and update corresponding timestamps."""
    if not can_transition(reservation.status, new_status):
        raise InvalidTransition(f"Invalid reservation transition: {reservation.status} -> {new_status}")

    reservation.status = new_status
    reservation.status_updated_at = now

    if new_status == "confirmed":
        reservation.confirmed_at = now
    elif new_status == "seated":
        reservation.seated_at = now
    elif new_status == "completed":
        reservation.completed_at = now
    elif new_status == "cancelled":
        reservation.cancelled_at = now
