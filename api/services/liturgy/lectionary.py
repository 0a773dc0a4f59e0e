# api/services/liturgy/lectionary.py
"""
Static lectionary: scripture references for a handful of days, keyed "MM-dd".

Used to resolve full reading text through the scripture provider when the
feed only carries abbreviated text.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class LectionaryEntry:
    """API-format references for one day's Mass."""
    day: str
    first_reading: str
    responsorial_psalm: str
    gospel: str
    second_reading: Optional[str] = None
    gospel_acclamation: Optional[str] = None
    note: Optional[str] = None

    @property
    def has_second_reading(self) -> bool:
        """Sundays and solemnities carry a second reading."""
        return self.second_reading is not None

    def mass_structure(self) -> list[tuple[str, str]]:
        """(title, api reference) pairs in the order they are proclaimed."""
        structure = [
            ("First Reading", self.first_reading),
            ("Responsorial Psalm", self.responsorial_psalm),
        ]
        if self.second_reading:
            structure.append(("Second Reading", self.second_reading))
        if self.gospel_acclamation:
            structure.append(("Gospel Acclamation", self.gospel_acclamation))
        structure.append(("Gospel", self.gospel))
        return structure

    def all_references(self) -> list[str]:
        return [ref for _, ref in self.mass_structure()]


LECTIONARY = {
    entry.day: entry
    for entry in [
        LectionaryEntry(
            day="08-27",
            first_reading="1TH.2.1-8",
            responsorial_psalm="PSA.139.1-6",
            gospel_acclamation="JHN.13.34",
            gospel="MAT.23.23-26",
            note="Memorial of Saint Monica",
        ),
        LectionaryEntry(
            day="08-28",
            first_reading="1TH.2.9-13",
            responsorial_psalm="PSA.139.7-12",
            gospel_acclamation="JHN.10.27",
            gospel="MAT.23.27-32",
            note="Memorial of Saint Augustine, Bishop and Doctor",
        ),
        LectionaryEntry(
            day="08-29",
            first_reading="JER.1.17-19",
            responsorial_psalm="PSA.71.1-6",
            gospel_acclamation="MAT.5.10",
            gospel="MRK.6.17-29",
            note="Memorial of the Passion of Saint John the Baptist",
        ),
        LectionaryEntry(
            day="08-30",
            first_reading="1TH.4.9-11",
            responsorial_psalm="PSA.98.1-9",
            gospel_acclamation="JHN.13.34",
            gospel="MAT.25.14-30",
            note="Saturday of the Twenty-first Week in Ordinary Time",
        ),
        LectionaryEntry(
            day="08-31",
            first_reading="DEU.4.1-2",
            responsorial_psalm="PSA.15.2-5",
            second_reading="JAS.1.17-18",
            gospel_acclamation="JAS.1.18",
            gospel="MRK.7.1-8",
            note="Twenty-second Sunday in Ordinary Time",
        ),
        LectionaryEntry(
            day="09-01",
            first_reading="1TH.4.13-18",
            responsorial_psalm="PSA.96.1-5",
            gospel_acclamation="LUK.4.18",
            gospel="LUK.4.16-30",
            note="Monday of the Twenty-second Week in Ordinary Time",
        ),
    ]
}


def entry_for(day: date) -> Optional[LectionaryEntry]:
    return LECTIONARY.get(day.strftime("%m-%d"))
