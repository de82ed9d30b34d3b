from __future__ import annotations

import json

import pytest

from cake.models import DutyDate, DutyPerson
from cake.render import format_table, select_current, to_ics, to_json


@pytest.fixture
def persons():
    jan_15 = DutyDate(month="January", day=15, date="2024-01-15")
    return [
        DutyPerson(
            colour="rgb(1,1,1)",
            name="Alice",
            email="a@x.com",
            slack="https://team.slack.com/messages/alice",
            slack_short="alice",
            duties=[jan_15, DutyDate(month="January", day=3, date="2024-01-03")],
            current=True,
            today=jan_15,
        ),
        DutyPerson(colour="rgb(2,2,2)", name="Bob", duties=[DutyDate(month="January", day=0, date="")]),
    ]


class TestTable:
    def test_layout(self, persons):
        assert format_table(persons) == (
            "* Alice         a@x.com  alice\n"
            "    15 January\n"
            "    3  January\n"
            "  Bob\n"
            "    0  January\n"
        )

    def test_empty(self):
        assert format_table([]) == ""


class TestJson:
    def test_full_roster(self, persons):
        data = json.loads(to_json(persons))
        assert [p["name"] for p in data] == ["Alice", "Bob"]
        assert data[0] == {
            "current": True,
            "today": {"month": "January", "day": 15, "date": "2024-01-15"},
            "name": "Alice",
            "email": "a@x.com",
            "slack": "https://team.slack.com/messages/alice",
            "slack_short": "alice",
            "colour": "rgb(1,1,1)",
            "duties": [
                {"month": "January", "day": 15, "date": "2024-01-15"},
                {"month": "January", "day": 3, "date": "2024-01-03"},
            ],
        }
        assert data[1]["today"] is None

    def test_current_only(self, persons):
        assert json.loads(to_json(persons, current_only=True))["name"] == "Alice"

    def test_current_only_without_duty(self, persons):
        persons[0].current = False
        assert to_json(persons, current_only=True) == "null"

    def test_keeps_non_ascii(self):
        person = DutyPerson(colour="rgb(1,1,1)", name="Иван")
        assert "Иван" in to_json([person])


def test_select_current(persons):
    assert select_current(persons) is persons[0]
    assert select_current(persons[1:]) is None


class TestIcs:
    def test_one_event_per_dated_duty(self, persons):
        text = to_ics(persons)
        assert text.startswith("BEGIN:VCALENDAR")
        assert text.count("BEGIN:VEVENT") == 2
        assert "On duty: Alice" in text
        assert "20240115" in text
        assert "20240103" in text
        assert "Bob" not in text

    def test_empty_roster(self):
        text = to_ics([])
        assert "BEGIN:VCALENDAR" in text
        assert "BEGIN:VEVENT" not in text
