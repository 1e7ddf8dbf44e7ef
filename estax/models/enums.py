"""Enumerations for estax."""

from enum import StrEnum


class FilingStatus(StrEnum):
    SINGLE = "S"
    MFJ = "MFJ"
    MFS = "MFS"
    HOH = "HOH"
    QSS = "QSS"

    @property
    def id(self) -> int:
        """Stable database id (1-5, in declaration order)."""
        return list(FilingStatus).index(self) + 1

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_id(cls, status_id: int) -> "FilingStatus":
        members = list(cls)
        if not 1 <= status_id <= len(members):
            raise ValueError(f"Unknown filing status id: {status_id}")
        return members[status_id - 1]


_DISPLAY_NAMES = {
    FilingStatus.SINGLE: "Single",
    FilingStatus.MFJ: "Married Filing Jointly",
    FilingStatus.MFS: "Married Filing Separately",
    FilingStatus.HOH: "Head of Household",
    FilingStatus.QSS: "Qualifying Surviving Spouse",
}


class Schedule(StrEnum):
    """IRS tax rate schedules as printed in the Form 1040-ES instructions."""

    X = "X"
    Y1 = "Y-1"
    Y2 = "Y-2"
    Z = "Z"

    @property
    def filing_statuses(self) -> tuple[FilingStatus, ...]:
        return _SCHEDULE_STATUSES[self]


_SCHEDULE_STATUSES = {
    Schedule.X: (FilingStatus.SINGLE,),
    Schedule.Y1: (FilingStatus.MFJ, FilingStatus.QSS),
    Schedule.Y2: (FilingStatus.MFS,),
    Schedule.Z: (FilingStatus.HOH,),
}
