from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from types import MappingProxyType
from typing import List, Mapping, Optional, Pattern

from .config import MONTHS_RU
from .models import DutyDate, DutyPerson


class ParseError(Exception):
    pass


class State(enum.Enum):
    CONTACTS = "contacts"
    NAME = "name"
    CONTACT_INFO = "contact_info"
    SCHEDULE = "schedule"
    DAY = "day"


@dataclass(frozen=True)
class SchedulePatterns:
    contact_colour: Pattern[str] = re.compile(r"<td.*?(rgb\([^)]+\)|highlight-\w+)")
    contact_email: Pattern[str] = re.compile(r"[\w.]+@\S+", re.ASCII)
    contact_slack: Pattern[str] = re.compile(r"https://.*slack.com/messages/([^\"]+)")
    month_header: Pattern[str] = re.compile(r"(\S+), (\d+)")
    day_number: Pattern[str] = re.compile(r"[+-]?[0-9]+")


DEFAULT_PATTERNS = SchedulePatterns()


def split_fragments(text: str) -> List[str]:
    """Put every tag boundary on its own line.

    A line break goes right after each ``>`` and right before each ``<``;
    everything else is kept verbatim.
    """
    return text.replace("<", "\n<").replace(">", ">\n").split("\n")


def parse_day(line: str, patterns: SchedulePatterns = DEFAULT_PATTERNS) -> int:
    if not patterns.day_number.fullmatch(line):
        return 0
    return int(line)


def normalize_date(year: int, month: int, day: int) -> str:
    """Render year/month/day as YYYY-MM-DD, rolling out-of-range parts over.

    Day 0 is the last day of the previous month and month 0 is December of
    the previous year.
    """
    carry_year, month_index = divmod(year * 12 + month - 1, 12)
    try:
        resolved = date(carry_year, month_index + 1, 1) + timedelta(days=day - 1)
    except (OverflowError, ValueError):
        logging.debug("Day %d of month %d is out of range", day, month)
        return ""
    return resolved.isoformat()


@dataclass
class _Cursor:
    state: State = State.CONTACTS
    person: DutyPerson = field(default_factory=DutyPerson)
    month: str = ""


class ScheduleParser:
    def __init__(
        self,
        months: Optional[Mapping[str, int]] = None,
        patterns: SchedulePatterns = DEFAULT_PATTERNS,
    ) -> None:
        self.months = MappingProxyType(dict(MONTHS_RU if months is None else months))
        self.patterns = patterns

    def resolve_month(self, month: str) -> int:
        return self.months.get(month.lower(), 0)

    def parse(self, document: str, now: date) -> List[DutyPerson]:
        if not isinstance(document, str):
            raise ParseError(f"Schedule document must be text, got {type(document).__name__}")

        roster: List[DutyPerson] = []
        cursor = _Cursor()
        for raw_line in split_fragments(document):
            line = raw_line.strip()
            if cursor.state is State.CONTACTS:
                self._on_contacts(cursor, line)
            elif cursor.state is State.NAME:
                self._on_name(cursor, line)
            elif cursor.state is State.CONTACT_INFO:
                self._on_contact_info(cursor, line, roster)
            elif cursor.state is State.SCHEDULE:
                self._on_schedule(cursor, line, roster)
            else:
                self._on_day(cursor, line, now)

        logging.debug("Parsed %d persons on duty roster", len(roster))
        return roster

    def _on_contacts(self, cursor: _Cursor, line: str) -> None:
        if line == "</table>":
            cursor.state = State.SCHEDULE
            return
        match = self.patterns.contact_colour.search(line)
        if match:
            cursor.person.colour = match.group(1)
            cursor.state = State.NAME

    def _on_name(self, cursor: _Cursor, line: str) -> None:
        if not line or "<" in line or ">" in line:
            return
        cursor.person.current = False
        cursor.person.name = line
        cursor.state = State.CONTACT_INFO

    def _on_contact_info(self, cursor: _Cursor, line: str, roster: List[DutyPerson]) -> None:
        if line == "</tr>":
            roster.append(cursor.person)
            cursor.person = DutyPerson()
            cursor.state = State.CONTACTS
            return
        email = self.patterns.contact_email.search(line)
        if email:
            cursor.person.email = email.group(0)
        slack = self.patterns.contact_slack.search(line)
        if slack:
            cursor.person.slack = slack.group(0)
            cursor.person.slack_short = slack.group(1)

    def _on_schedule(self, cursor: _Cursor, line: str, roster: List[DutyPerson]) -> None:
        header = self.patterns.month_header.search(line)
        if header:
            cursor.month = header.group(1)
        for person in roster:
            # first hit wins, so a colour that is a substring of another shadows it
            if person.colour in line:
                cursor.person = person
                cursor.state = State.DAY
                return

    def _on_day(self, cursor: _Cursor, line: str, now: date) -> None:
        day = parse_day(line, self.patterns)
        month_number = self.resolve_month(cursor.month)
        duty = DutyDate(month=cursor.month, day=day, date=normalize_date(now.year, month_number, day))
        if now.day == day and now.month == month_number:
            cursor.person.current = True
            cursor.person.today = DutyDate(month=duty.month, day=duty.day, date=duty.date)
        cursor.person.duties.append(duty)
        cursor.state = State.SCHEDULE


def parse_schedule(
    document: str,
    now: date,
    months: Optional[Mapping[str, int]] = None,
) -> List[DutyPerson]:
    return ScheduleParser(months=months).parse(document, now)
