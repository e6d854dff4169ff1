"""FHIR ``date`` values, which may be partial (year or year-month only).

See https://www.hl7.org/fhir/datatypes.html#date
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass


@dataclass(frozen=True)
class FhirDate:
    year: int
    month: int | None = None
    day: int | None = None

    @classmethod
    def parse(cls, text: str) -> FhirDate:
        """Parse ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``.

        The year takes exactly four digits; month and day may drop their
        leading zero.

        Raises:
            ValueError: If the text is not a FHIR date
        """
        raw = text.strip()
        parts = raw.split("-")
        if not 1 <= len(parts) <= 3 or not all(part.isdigit() for part in parts):
            raise ValueError(f"Invalid FHIR date: {text!r}")
        if len(parts[0]) != 4:
            raise ValueError(f"FHIR date year must have four digits: {text!r}")

        numbers = [int(part) for part in parts]
        year = numbers[0]
        month = numbers[1] if len(numbers) > 1 else None
        day = numbers[2] if len(numbers) > 2 else None

        if year == 0:
            raise ValueError(f"Invalid year in FHIR date: {text!r}")
        if month is not None and not 1 <= month <= 12:
            raise ValueError(f"Invalid month in FHIR date: {text!r}")
        if day is not None and not 1 <= day <= calendar.monthrange(year, month)[1]:
            raise ValueError(f"Invalid day in FHIR date: {text!r}")

        return cls(year=year, month=month, day=day)

    def __str__(self) -> str:
        text = f"{self.year:04d}"
        if self.month is not None:
            text += f"-{self.month:02d}"
            if self.day is not None:
                text += f"-{self.day:02d}"
        return text
