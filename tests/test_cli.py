"""Tests for the ledgerview command line."""

import json

import pytest

from ledgerview.cli.main import cli

from conftest import build_record


@pytest.fixture
def run(cli_runner, temp_store):
    """Invoke the CLI against the temporary store."""

    def _run(*args, input=None):
        return cli_runner.invoke(
            cli, ["--db-path", temp_store.database_path, *args], input=input
        )

    return _run


def _statement_id(output):
    # Output looks like "Added custom statement 'Grant' (400.00, ID: <uuid>)"
    return output.split("ID:")[1].strip().rstrip(")")


def test_help(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "financial statements from bank transactions" in result.output


class TestClassify:
    def test_lists_classified_transactions(self, run, transactions_file):
        result = run("classify", transactions_file)

        assert result.exit_code == 0
        assert "intangible_purchase" in result.output
        assert "fixed_asset_purchase" in result.output
        assert "loan_proceeds" in result.output
        assert "6 transactions, 0 ambiguous" in result.output

    def test_ambiguous_only(self, run, tmp_path):
        path = tmp_path / "ambiguous.json"
        path.write_text(json.dumps([
            build_record("a", description="loan for equipment purchase, capex"),
            build_record("b", description="coffee beans"),
        ]))

        result = run("classify", str(path), "--ambiguous")

        assert result.exit_code == 0
        assert "*loan for equipment purchase, capex" in result.output
        assert "coffee beans" not in result.output
        assert "1 transactions, 1 ambiguous" in result.output

    def test_no_ambiguous_transactions(self, run, transactions_file):
        result = run("classify", transactions_file, "--ambiguous")

        assert result.exit_code == 0
        assert "No transactions found." in result.output

    def test_bank_filter(self, run, transactions_file):
        result = run("classify", transactions_file, "--bank", "bank-2")
        assert "No transactions found." in result.output

    def test_invalid_json(self, run, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = run("classify", str(path))

        assert result.exit_code == 1
        assert "is not valid JSON" in result.output

    def test_wrong_shape(self, run, tmp_path):
        path = tmp_path / "object.json"
        path.write_text(json.dumps({"data": []}))

        result = run("classify", str(path))

        assert result.exit_code == 1
        assert "'transactions' array" in result.output

    def test_mixed_timestamp_formats(self, run, tmp_path):
        path = tmp_path / "mixed.json"
        path.write_text(json.dumps([
            build_record("late", description="coffee beans", booked="2024-01-16"),
            build_record("early", description="printer paper", booked="2024-01-15T10:00:00Z"),
        ]))

        result = run("classify", str(path))

        assert result.exit_code == 0
        assert result.output.index("printer paper") < result.output.index("coffee beans")
        assert "2 transactions, 0 ambiguous" in result.output

    def test_file_not_utf8(self, run, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"transaction_information": "caf\xe9"}]')

        result = run("classify", str(path))

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "is not valid UTF-8" in result.output

    def test_skipped_records_are_reported(self, run, tmp_path, sample_records):
        path = tmp_path / "partly.json"
        path.write_text(json.dumps(sample_records + [{"transaction_id": "bad"}]))

        result = run("classify", str(path))

        assert result.exit_code == 0
        assert "Warning: skipped Record 7" in result.output
        assert "6 transactions" in result.output


class TestReports:
    def test_balance_sheet(self, run, transactions_file):
        result = run("report", "balance-sheet", transactions_file)

        assert result.exit_code == 0
        assert "Balance Sheet as of 2024-03-31" in result.output
        assert "TOTAL ASSETS" in result.output
        assert "TOTAL LIABILITIES & EQUITY" in result.output
        assert "Balance Check" in result.output

    def test_balance_sheet_with_cash(self, run, transactions_file):
        result = run("report", "balance-sheet", transactions_file, "--cash", "125,000")

        assert result.exit_code == 0
        assert "125,000.00" in result.output

    def test_balance_sheet_invalid_cash(self, run, transactions_file):
        result = run("report", "balance-sheet", transactions_file, "--cash", "plenty")

        assert result.exit_code == 1
        assert "Invalid cash amount" in result.output

    def test_profit_loss(self, run, transactions_file):
        result = run("report", "profit-loss", transactions_file)

        assert result.exit_code == 0
        assert "Profit & Loss, 2024-01-01 to 2024-03-31" in result.output
        assert "1,000.00" in result.output
        assert "NET PROFIT" in result.output
        assert "Net Profit Margin" in result.output

    def test_cash_flow_direct_only(self, run, transactions_file):
        result = run("report", "cash-flow", transactions_file, "--method", "direct")

        assert result.exit_code == 0
        assert "Cash Flow (direct method)" in result.output
        assert "Cash Flow (indirect method)" not in result.output
        assert "3,000.00" in result.output
        assert "Balance by Period" in result.output
        assert "2024-02" in result.output

    def test_cash_flow_both_methods(self, run, transactions_file):
        result = run("report", "cash-flow", transactions_file)

        assert result.exit_code == 0
        assert "Cash Flow (direct method)" in result.output
        assert "Cash Flow (indirect method)" in result.output
        assert "Total Working Capital Changes" in result.output

    def test_quarter_granularity(self, run, transactions_file):
        result = run("report", "cash-flow", transactions_file, "--granularity", "quarter")

        assert result.exit_code == 0
        assert "2024-Q1" in result.output

    def test_explicit_dates(self, run, transactions_file):
        result = run(
            "report", "profit-loss", transactions_file,
            "--start-date", "2024-02-01", "--end-date", "2024-02-29",
        )

        assert result.exit_code == 0
        assert "2024-02-01 to 2024-02-29" in result.output

    def test_inverted_dates(self, run, transactions_file):
        result = run(
            "report", "profit-loss", transactions_file,
            "--start-date", "2024-03-01", "--end-date", "2024-01-01",
        )

        assert result.exit_code == 1
        assert "Error: Range start 2024-03-01 is after range end 2024-01-01" in result.output

    def test_multiple_periods_rejected(self, run, transactions_file):
        result = run("report", "profit-loss", transactions_file, "--this-month", "--last-year")

        assert result.exit_code == 1
        assert "Only one period option" in result.output

    def test_missing_file(self, run, tmp_path):
        result = run("report", "profit-loss", str(tmp_path / "nope.json"))
        assert result.exit_code != 0


class TestKpis:
    def test_kpis(self, run, transactions_file):
        result = run("kpis", transactions_file)

        assert result.exit_code == 0
        assert "Burn Rate" in result.output
        assert "2024-01" in result.output
        assert "2024-03" in result.output
        assert "Spending by Category" not in result.output

    def test_spending(self, run, transactions_file):
        result = run("kpis", transactions_file, "--spending")

        assert result.exit_code == 0
        assert "Spending by Category" in result.output
        assert "Food & Dining (1)" in result.output
        assert "5,900.00" in result.output
        assert "4,000.00" in result.output

    def test_empty_file(self, run, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]")

        result = run("kpis", str(path))

        assert result.exit_code == 0
        assert "No transactions found." in result.output


class TestAdjustments:
    def test_add_and_list(self, run):
        result = run("adjustment", "add", "profit-loss", "Grant", "400", "--type", "income",
                     "--date", "2024-02-01")

        assert result.exit_code == 0
        assert "Added custom statement 'Grant' (400.00, ID:" in result.output

        result = run("adjustment", "list", "profit-loss")

        assert result.exit_code == 0
        assert "2024-02-01" in result.output
        assert "Grant" in result.output

    def test_expense_is_stored_negative(self, run):
        result = run("adjustment", "add", "profit-loss", "Bonus", "250", "--type", "expense",
                     "--amount-type", "expense")

        assert result.exit_code == 0
        assert "(-250.00, ID:" in result.output

    def test_adjustment_shows_in_report(self, run, transactions_file):
        run("adjustment", "add", "profit-loss", "Grant", "400", "--type", "income")

        result = run("report", "profit-loss", transactions_file)

        assert result.exit_code == 0
        assert "Revenue (computed)" in result.output
        assert "Revenue (adjustments)" in result.output
        assert "1,400.00" in result.output

    def test_workspaces_are_isolated(self, run, transactions_file):
        run("adjustment", "add", "profit-loss", "Grant", "400", "--type", "income",
            "--workspace", "acme")

        default = run("report", "profit-loss", transactions_file)
        acme = run("report", "profit-loss", transactions_file, "--workspace", "acme")

        assert "Revenue (adjustments)" not in default.output
        assert "Revenue (adjustments)" in acme.output

    def test_add_rejects_type_from_other_report(self, run):
        result = run("adjustment", "add", "profit-loss", "Desk", "900", "--type", "asset")

        assert result.exit_code == 1
        assert "Error: Statement type 'asset' is not allowed" in result.output

    def test_rejected_command_is_logged(self, run):
        result = run("--log-level", "info", "adjustment", "add", "profit-loss", "Desk", "900",
                     "--type", "asset")

        assert result.exit_code == 1
        assert "command_rejected" in result.output
        assert "ValidationError" in result.output
        assert "Error: Statement type 'asset' is not allowed" in result.output

    def test_add_requires_category_for_assets(self, run):
        result = run("adjustment", "add", "balance-sheet", "Deposit", "900", "--type", "asset")

        assert result.exit_code == 1
        assert "requires a category" in result.output

    def test_add_invalid_amount(self, run):
        result = run("adjustment", "add", "cash-flow", "Grant", "abc", "--type", "financing")

        assert result.exit_code == 1
        assert "Amount must be numeric" in result.output

    def test_add_invalid_date(self, run):
        result = run("adjustment", "add", "cash-flow", "Grant", "10", "--type", "financing",
                     "--date", "someday")

        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_list_empty(self, run):
        result = run("adjustment", "list", "balance-sheet")

        assert result.exit_code == 0
        assert "No custom statements found." in result.output

    def test_remove(self, run):
        added = run("adjustment", "add", "balance-sheet", "Deposit", "900", "--type", "asset",
                    "--category", "current")
        statement_id = _statement_id(added.output)

        result = run("adjustment", "remove", "balance-sheet", statement_id)

        assert result.exit_code == 0
        assert f"Removed custom statement {statement_id}" in result.output
        assert "No custom statements found." in run("adjustment", "list", "balance-sheet").output

    def test_remove_missing(self, run):
        result = run("adjustment", "remove", "balance-sheet", "missing-id")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_clear(self, run):
        run("adjustment", "add", "cash-flow", "Accrual", "300", "--type", "operating",
            "--category", "working_capital")

        result = run("adjustment", "clear", "cash-flow", "--yes")

        assert result.exit_code == 0
        assert "Cleared cash-flow custom statements of workspace 'default'" in result.output
        assert "No custom statements found." in run("adjustment", "list", "cash-flow").output

    def test_clear_cancelled(self, run):
        run("adjustment", "add", "cash-flow", "Accrual", "300", "--type", "financing")

        result = run("adjustment", "clear", "cash-flow", input="n\n")

        assert "Clear cancelled." in result.output
        assert "Accrual" in run("adjustment", "list", "cash-flow").output
