"""Loading aggregator records from files."""

import json
from typing import Any

import click


def load_records(ctx: click.Context, path: str) -> list[Any]:
    """Read aggregator records from a JSON file.

    The file holds either a JSON array of records or an object with a
    ``transactions`` array, as the aggregator's transactions endpoint
    returns it.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except UnicodeDecodeError as e:
        click.echo(f"Error: {path} is not valid UTF-8: {e}", err=True)
        ctx.exit(1)
    except json.JSONDecodeError as e:
        click.echo(f"Error: {path} is not valid JSON: {e}", err=True)
        ctx.exit(1)

    if isinstance(data, dict):
        data = data.get("transactions")
    if not isinstance(data, list):
        click.echo(
            f"Error: {path} must contain a JSON array of transactions "
            "or an object with a 'transactions' array",
            err=True,
        )
        ctx.exit(1)
    return data
