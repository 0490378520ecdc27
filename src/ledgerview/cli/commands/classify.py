"""Classification command."""

import click
from ledgerview.cli.formatting import format_amount, warn
from ledgerview.cli.input import load_records
from ledgerview.domain.classifier import ActivityClassifier, find_ambiguities
from ledgerview.domain.normalizer import TransactionNormalizer
from ledgerview.domain.reporting import filter_by_bank


@click.command("classify")
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--bank", help="Only classify transactions of this bank id ('all' for every bank)")
@click.option("--ambiguous", is_flag=True, help="Only show transactions several rules matched")
@click.pass_context
def classify_transactions(ctx, transactions_file: str, bank: str | None, ambiguous: bool):
    """Classify transactions into operating, investing and financing activity.

    Transactions marked with * were matched by more than one rule; the
    first rule in priority order decided.

    Examples:
        ledgerview classify transactions.json
        ledgerview classify transactions.json --bank bank-1 --ambiguous
    """
    records = load_records(ctx, transactions_file)
    result = TransactionNormalizer().normalize_batch(filter_by_bank(records, bank))
    for message in result.errors:
        warn(f"skipped {message}")

    classified = ActivityClassifier().classify_all(result.transactions)
    if ambiguous:
        classified = [item for item in classified if item.is_ambiguous]

    if not classified:
        click.echo("No transactions found.")
        return

    click.echo(
        f"{'Date':<10} {'Amount':>14} {'Dir':<6} {'Activity':<10} "
        f"{'Subcategory':<22} Description"
    )
    click.echo("-" * 100)
    for item in sorted(classified, key=lambda c: (c.transaction.booked_on, c.id)):
        txn = item.transaction
        marker = "*" if item.is_ambiguous else " "
        click.echo(
            f"{txn.booked_on.isoformat():<10} {format_amount(txn.amount.value):>14} "
            f"{txn.direction.value:<6} {item.activity.value:<10} "
            f"{item.subcategory.value:<22}{marker}{txn.description}"
        )

    ambiguities = find_ambiguities(classified)
    click.echo("-" * 100)
    click.echo(f"{len(classified)} transactions, {len(ambiguities)} ambiguous")


def register_commands(cli):
    """Register classify command with main CLI."""
    cli.add_command(classify_transactions)
