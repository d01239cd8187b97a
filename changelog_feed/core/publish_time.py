"""
Synthetic publish times for releases sharing a calendar date.

The changelog lists releases newest first and several versions may ship on
the same day. A date-only sort would put them in arbitrary order, so each
release gets a fake hour: the first one seen on a date gets 20:00, the next
19:00, and so on down to 00:00.
"""

from __future__ import annotations

from datetime import date


FIRST_HOUR = 20
LAST_HOUR = 0


def format_slot(day: date, hour: int) -> str:
    return f"{day.isoformat()}T{hour:02d}:00"


class PublishTimeRegistry:
    """Slots already handed out during one run. Not persisted."""

    def __init__(self) -> None:
        self._slots: set[str] = set()

    def allocate(self, day: date) -> str | None:
        """Return the next free ``YYYY-MM-DDTHH:00`` slot for ``day``.

        Returns None once every hour from 20 down to 0 is taken; callers drop
        the section in that case.
        """
        hour = FIRST_HOUR
        while format_slot(day, hour) in self._slots:
            hour -= 1
            if hour < LAST_HOUR:
                return None
        slot = format_slot(day, hour)
        self._slots.add(slot)
        return slot

    def __contains__(self, slot: object) -> bool:
        return slot in self._slots

    def __len__(self) -> int:
        return len(self._slots)
