from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from .card import BingoCard
from .engine import RoundResult

ROW_LABELS = ("B", "I", "N", "G", "O")

bingo_theme = Theme(
    {
        "cell": "bold green on black",
        "revealed": "bold magenta on black",
        "header": "bold black on white",
        "value": "bold",
        "hint": "italic underline",
        "error": "bold red",
    }
)


def make_console(**kwargs) -> Console:
    return Console(theme=bingo_theme, **kwargs)


def card_table(card: BingoCard) -> Table:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("label", style="bold")
    for _ in range(len(ROW_LABELS)):
        table.add_column(justify="right")

    for label, values, flags in zip(ROW_LABELS, card.numbers, card.revealed):
        cells = [
            Text(f"{value:02d}", style="revealed" if flag else "cell")
            for value, flag in zip(values, flags)
        ]
        table.add_row(label, *cells)
    return table


def turn_header(turn: int) -> Text:
    return Text(f"----------------[Current Turn is {turn}]----------------", style="header")


def format_percent(result: RoundResult) -> str:
    if result.percent is None:
        return "n/a"
    return f"{result.percent:.6g}%"


def format_round(result: RoundResult) -> str:
    """Rich markup line for one round, e.g. ``within 3 draws: 12.5% (60 patterns)``."""

    return (
        f"Chance of BINGO within {result.round} draws: "
        f"[value]{format_percent(result)}[/value] "
        f"([value]{result.total_outcomes:,}[/value] patterns)"
    )


def bingo_banner() -> Text:
    banner = Text()
    for letter, colour in zip("BINGO!", ("green", "red", "blue", "cyan", "yellow", "magenta")):
        banner.append(letter, style=f"bold {colour}")
    rule = "-" * 26
    return Text.assemble(rule, "\n\n          ", banner, "          \n\n", rule)


__all__ = [
    "ROW_LABELS",
    "bingo_banner",
    "bingo_theme",
    "card_table",
    "format_percent",
    "format_round",
    "make_console",
    "turn_header",
]
