from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class DutyDate:
    month: str
    day: int
    date: str

    def to_dict(self) -> dict:
        return {"month": self.month, "day": self.day, "date": self.date}


@dataclass
class DutyPerson:
    colour: str = ""
    name: str = ""
    email: str = ""
    slack: str = ""
    slack_short: str = ""
    duties: list[DutyDate] = field(default_factory=list)
    current: bool = False
    today: Optional[DutyDate] = None

    def to_dict(self) -> dict:
        return {
            "current": self.current,
            "today": self.today.to_dict() if self.today else None,
            "name": self.name,
            "email": self.email,
            "slack": self.slack,
            "slack_short": self.slack_short,
            "colour": self.colour,
            "duties": [duty.to_dict() for duty in self.duties],
        }
