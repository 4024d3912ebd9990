"""Date-derived storage paths for published notes.

A note written on 25 October 2025 lands at ``2025/Oct/2025-10-25.md``.
"""

from __future__ import annotations

from datetime import datetime

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


class InvalidMonthIndexError(ValueError):
    """Raised when a zero-based month index falls outside 0-11."""


def month_abbreviation(month_index: int) -> str:
    """Return the English three-letter abbreviation for a zero-based month."""
    if month_index < 0 or month_index > 11:
        raise InvalidMonthIndexError(f"Invalid month index: {month_index}")
    return MONTH_ABBREVIATIONS[month_index]


def directory_path(moment: datetime | None = None) -> str:
    """Return the ``{year}/{Mon}/`` directory for ``moment`` (default: now)."""
    moment = moment or datetime.now()
    return f"{moment.year}/{month_abbreviation(moment.month - 1)}/"


def file_name(moment: datetime | None = None) -> str:
    """Return the ``{year}-{MM}-{DD}.md`` file name for ``moment``."""
    moment = moment or datetime.now()
    return f"{moment.year}-{moment.month:02d}-{moment.day:02d}.md"


def full_path(moment: datetime | None = None) -> str:
    """Join the directory and file name with exactly one ``/``."""
    moment = moment or datetime.now()
    directory = directory_path(moment)
    name = file_name(moment)
    if directory.endswith("/"):
        return f"{directory}{name}"
    return f"{directory}/{name}"


__all__ = [
    "InvalidMonthIndexError",
    "MONTH_ABBREVIATIONS",
    "directory_path",
    "file_name",
    "full_path",
    "month_abbreviation",
]
