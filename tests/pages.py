"""Builders for wiki storage-format pages used across the tests."""

from __future__ import annotations


def _cell(colour: str) -> str:
    if colour.startswith("rgb("):
        return f'<td style="background-color: {colour};">'
    return f'<td class="{colour}">'


def roster_row(colour: str, name: str, contact: str = "") -> str:
    return f"<tr>{_cell(colour)}<p>{name}</p></td><td>{contact}</td></tr>"


def roster_table(*rows: str) -> str:
    return "<table><tbody><tr><th>Name</th><th>Contact</th></tr>" + "".join(rows) + "</tbody></table>"


def day_cell(colour: str, text: str) -> str:
    return f"{_cell(colour)}{text}</td>"


def calendar(header: str, *cells: str) -> str:
    heading = f"<h2>{header}</h2>" if header else ""
    return (
        heading
        + "<table><tbody><tr><th>Mon</th><th>Tue</th><th>Wed</th></tr><tr>"
        + "".join(cells)
        + "</tr></tbody></table>"
    )


def sample_page() -> str:
    """Roster of Alice and Bob with one January and one February section."""
    return roster_table(
        roster_row(
            "rgb(1,1,1)",
            "Alice",
            'alice@x.com / <a href="https://team.slack.com/messages/alice">@alice</a>',
        ),
        roster_row("rgb(2,2,2)", "Bob"),
    ) + calendar(
        "January, 2024",
        "<td>14</td>",
        day_cell("rgb(1,1,1)", "15"),
        day_cell("rgb(2,2,2)", "16"),
    ) + calendar(
        "February, 2024",
        day_cell("rgb(2,2,2)", "1"),
        day_cell("rgb(1,1,1)", "2"),
    )
