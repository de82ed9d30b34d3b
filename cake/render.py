from __future__ import annotations

import json
from typing import List, Optional, Sequence

from ics import Calendar, Event

from .models import DutyPerson

COLUMN_PADDING = 2


def select_current(persons: Sequence[DutyPerson]) -> Optional[DutyPerson]:
    for person in persons:
        if person.current:
            return person
    return None


def _align(rows: List[List[str]]) -> str:
    # every cell but the last one in a row is padded to its column width
    widths: dict[int, int] = {}
    for row in rows:
        for idx, cell in enumerate(row[:-1]):
            widths[idx] = max(widths.get(idx, 0), len(cell) + COLUMN_PADDING)
    lines = []
    for row in rows:
        cells = [cell.ljust(widths[idx]) for idx, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append("".join(cells).rstrip())
    return "\n".join(lines) + "\n" if lines else ""


def format_table(persons: Sequence[DutyPerson]) -> str:
    """Render the roster as an aligned plain-text table.

    The person on duty today is marked with ``*``; each duty date follows
    its person on an indented line.
    """
    rows: List[List[str]] = []
    for person in persons:
        flag = "*" if person.current else ""
        rows.append([f"{flag:<2}{person.name}", person.email, person.slack_short])
        for duty in person.duties:
            rows.append([f"    {duty.day:<2} {duty.month}", "", ""])
    return _align(rows)


def to_json(persons: Sequence[DutyPerson], current_only: bool = False) -> str:
    if current_only:
        current = select_current(persons)
        return json.dumps(current.to_dict() if current else None, ensure_ascii=False)
    return json.dumps([person.to_dict() for person in persons], ensure_ascii=False)


def to_ics(persons: Sequence[DutyPerson]) -> str:
    cal = Calendar()
    for person in persons:
        for duty in person.duties:
            if not duty.date:
                continue
            ev = Event()
            ev.name = f"On duty: {person.name}"
            ev.begin = duty.date
            ev.make_all_day()
            description = " · ".join(s for s in [person.email, person.slack] if s)
            if description:
                ev.description = description
            cal.events.add(ev)
    return "".join(cal.serialize_iter())
