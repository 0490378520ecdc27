"""Plain-text rendering helpers for statements."""

from decimal import Decimal

import click

from ledgerview.domain.entities import MergedTotal

LINE_WIDTH = 80
LABEL_WIDTH = 50
AMOUNT_WIDTH = 20
INDENT_SIZE = 4


def format_amount(value: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{value:,.2f}"


def echo_header(title: str) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * LINE_WIDTH)


def echo_line(label: str, value: Decimal, indent: int = 1) -> None:
    indent_str = " " * (INDENT_SIZE * indent)
    width = LABEL_WIDTH - INDENT_SIZE * indent
    click.echo(f"{indent_str}{label:<{width}} {format_amount(value):>{AMOUNT_WIDTH}}")


def echo_total(label: str, total: MergedTotal, indent: int = 0) -> None:
    """Show a section subtotal, splitting out manual adjustments if any."""
    if total.is_adjusted:
        echo_line(f"{label} (computed)", total.computed, indent)
        echo_line(f"{label} (adjustments)", total.adjustment, indent)
    echo_line(label, total.total, indent)


def echo_rule(char: str = "-") -> None:
    click.echo(char * LINE_WIDTH)


def warn(message: str) -> None:
    click.echo(f"Warning: {message}", err=True)
