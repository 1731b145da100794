"""Rate limit window granularities."""

from __future__ import annotations

from enum import Enum

from crpt_client.core.errors import ConfigurationAppError


class TimeUnit(str, Enum):
    """Granularity of a rate limit window.

    A window is always exactly one unit long; callers choose the unit,
    never a multiple of it.
    """

    NANOSECONDS = "nanoseconds"
    MICROSECONDS = "microseconds"
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @property
    def seconds(self) -> float:
        """Length of one unit in seconds."""
        return _UNIT_SECONDS[self]

    @classmethod
    def parse(cls, value: "TimeUnit | str") -> "TimeUnit":
        """Resolve a unit from an enum member or a case-insensitive name.

        Singular forms ("second", "minute") are accepted as well.

        Raises:
            ConfigurationAppError: If the value does not name a known unit.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            if not name.endswith("s"):
                name += "s"
            for unit in cls:
                if unit.value == name:
                    return unit
        raise ConfigurationAppError(
            code="invalid_time_unit",
            message=f"Unknown time unit: {value!r}",
            details={"hint": ", ".join(unit.value for unit in cls)},
        )


_UNIT_SECONDS: dict[TimeUnit, float] = {
    TimeUnit.NANOSECONDS: 1e-9,
    TimeUnit.MICROSECONDS: 1e-6,
    TimeUnit.MILLISECONDS: 1e-3,
    TimeUnit.SECONDS: 1.0,
    TimeUnit.MINUTES: 60.0,
    TimeUnit.HOURS: 3600.0,
    TimeUnit.DAYS: 86400.0,
}
