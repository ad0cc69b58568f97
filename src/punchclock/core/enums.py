from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class PunchType(str, Enum):
    """The four punch kinds a user can record."""

    CLOCK_IN = "ClockIn"
    CLOCK_OUT = "ClockOut"
    BREAK_START = "BreakStart"
    BREAK_END = "BreakEnd"

    @property
    def code(self) -> int:
        return _PUNCH_CODES[self]

    @property
    def label(self) -> str:
        return _PUNCH_LABELS[self]

    @classmethod
    def parse(cls, value) -> "PunchType":
        """Accept the enum name ("ClockIn") or the legacy numeric code (1-4)."""

        if isinstance(value, PunchType):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid punch type: {value!r}")
        if isinstance(value, int):
            for member, code in _PUNCH_CODES.items():
                if code == value:
                    return member
            raise ValueError(f"Invalid punch type: {value!r}")
        if isinstance(value, str):
            v = value.strip()
            if v.isdigit():
                return cls.parse(int(v))
            for member in cls:
                if member.value.lower() == v.lower():
                    return member
        raise ValueError(f"Invalid punch type: {value!r}")


_PUNCH_CODES = {
    PunchType.CLOCK_IN: 1,
    PunchType.CLOCK_OUT: 2,
    PunchType.BREAK_START: 3,
    PunchType.BREAK_END: 4,
}

_PUNCH_LABELS = {
    PunchType.CLOCK_IN: "Clock in",
    PunchType.CLOCK_OUT: "Clock out",
    PunchType.BREAK_START: "Break start",
    PunchType.BREAK_END: "Break end",
}
