"""Ledger proxy estimates.

Bank transactions carry no ledger detail, so several statement lines are
estimated from fixed ratios against computed bases. The ratios are
placeholders for a missing ledger integration and are kept stable so
reports stay comparable between releases. Builders only ever read them
through an ``Estimates`` object; a ledger-backed implementation can replace
``FixedRatioEstimates`` without touching aggregation code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from ledgerview.domain.entities import ZERO

COGS_RATIO = Decimal("0.40")
SALARIES_RATIO = Decimal("0.25")
RENT_RATIO = Decimal("0.15")
MARKETING_RATIO = Decimal("0.10")
ADMIN_RATIO = Decimal("0.10")

INVENTORY_RATIO = Decimal("0.15")
VAT_RATE = Decimal("0.05")
PPE_RATIO = Decimal("0.30")
RIGHT_OF_USE_RATIO = Decimal("0.10")
INTANGIBLES_RATIO = Decimal("0.05")
OWNER_CAPITAL_RATIO = Decimal("0.40")
LONG_TERM_LOANS_RATIO = Decimal("0.20")
NON_CURRENT_LEASE_RATIO = Decimal("0.10")
SHORT_TERM_LOANS_RATIO = Decimal("0.15")
CURRENT_LEASE_RATIO = Decimal("0.05")

DEPRECIABLE_ASSETS = Decimal("100000")
DEPRECIATION_YEARS = 5
AMORTIZABLE_INTANGIBLES = Decimal("50000")
AMORTIZATION_YEARS = 3
TERM_LOAN_PRINCIPAL = Decimal("1000000")
TERM_LOAN_RATE = Decimal("0.05")
LEASE_LIABILITY = Decimal("500000")
LEASE_RATE = Decimal("0.06")
MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class ProfitLossRatios:
    """Shares of total classified expense assigned to P&L lines."""

    cogs: Decimal = COGS_RATIO
    salaries: Decimal = SALARIES_RATIO
    rent: Decimal = RENT_RATIO
    marketing: Decimal = MARKETING_RATIO
    admin: Decimal = ADMIN_RATIO


@dataclass(frozen=True)
class BalanceSheetRatios:
    """Proxy ratios for balance sheet lines.

    inventory applies to cash plus receivables; ppe, right_of_use and
    intangibles to computed current assets; the liability and equity ratios
    to computed total assets.
    """

    inventory: Decimal = INVENTORY_RATIO
    vat_rate: Decimal = VAT_RATE
    ppe: Decimal = PPE_RATIO
    right_of_use: Decimal = RIGHT_OF_USE_RATIO
    intangibles: Decimal = INTANGIBLES_RATIO
    owner_capital: Decimal = OWNER_CAPITAL_RATIO
    long_term_loans: Decimal = LONG_TERM_LOANS_RATIO
    non_current_lease: Decimal = NON_CURRENT_LEASE_RATIO
    short_term_loans: Decimal = SHORT_TERM_LOANS_RATIO
    current_lease: Decimal = CURRENT_LEASE_RATIO


@dataclass(frozen=True)
class PlaceholderSchedules:
    """Fixed depreciation, amortization and financing schedules."""

    depreciable_assets: Decimal = DEPRECIABLE_ASSETS
    depreciation_years: int = DEPRECIATION_YEARS
    amortizable_intangibles: Decimal = AMORTIZABLE_INTANGIBLES
    amortization_years: int = AMORTIZATION_YEARS
    term_loan_principal: Decimal = TERM_LOAN_PRINCIPAL
    term_loan_rate: Decimal = TERM_LOAN_RATE
    lease_liability: Decimal = LEASE_LIABILITY
    lease_rate: Decimal = LEASE_RATE

    @property
    def depreciation(self) -> Decimal:
        return self.depreciable_assets / self.depreciation_years

    @property
    def amortization(self) -> Decimal:
        return self.amortizable_intangibles / self.amortization_years

    @property
    def finance_costs(self) -> Decimal:
        """Monthly interest on the term loan plus the lease liability."""
        return (
            self.term_loan_principal * self.term_loan_rate / MONTHS_PER_YEAR
            + self.lease_liability * self.lease_rate / MONTHS_PER_YEAR
        )


class Estimates(ABC):
    """Source of figures the bank feed cannot provide."""

    @abstractmethod
    def cogs(self, total_expense: Decimal) -> Decimal:
        pass

    @abstractmethod
    def salaries(self, total_expense: Decimal) -> Decimal:
        pass

    @abstractmethod
    def rent(self, total_expense: Decimal) -> Decimal:
        pass

    @abstractmethod
    def marketing(self, total_expense: Decimal) -> Decimal:
        pass

    @abstractmethod
    def admin(self, total_expense: Decimal) -> Decimal:
        pass

    @abstractmethod
    def depreciation(self) -> Decimal:
        pass

    @abstractmethod
    def amortization(self) -> Decimal:
        pass

    @abstractmethod
    def finance_costs(self) -> Decimal:
        pass

    @abstractmethod
    def inventory(self, cash: Decimal, receivables: Decimal) -> Decimal:
        pass

    @abstractmethod
    def vat_receivable(self, credits: Decimal, debits: Decimal) -> Decimal:
        pass

    @abstractmethod
    def vat_payable(self, credits: Decimal, debits: Decimal) -> Decimal:
        pass

    @abstractmethod
    def vat_position(self, credits: Decimal, debits: Decimal) -> Decimal:
        """Net VAT owed (may be negative), used for working-capital changes."""
        pass

    @abstractmethod
    def non_current_assets(self, current_assets: Decimal) -> dict[str, Decimal]:
        """Return ppe, right_of_use and intangibles lines."""
        pass

    @abstractmethod
    def funding(self, total_assets: Decimal) -> dict[str, Decimal]:
        """Return owner_capital, long_term_loans, non_current_lease,
        short_term_loans and current_lease lines."""
        pass


class FixedRatioEstimates(Estimates):
    """Estimates from fixed ratios and placeholder schedules."""

    def __init__(
        self,
        profit_loss: ProfitLossRatios = ProfitLossRatios(),
        balance_sheet: BalanceSheetRatios = BalanceSheetRatios(),
        schedules: PlaceholderSchedules = PlaceholderSchedules(),
    ):
        self.profit_loss = profit_loss
        self.balance_sheet = balance_sheet
        self.schedules = schedules

    def cogs(self, total_expense: Decimal) -> Decimal:
        return total_expense * self.profit_loss.cogs

    def salaries(self, total_expense: Decimal) -> Decimal:
        return total_expense * self.profit_loss.salaries

    def rent(self, total_expense: Decimal) -> Decimal:
        return total_expense * self.profit_loss.rent

    def marketing(self, total_expense: Decimal) -> Decimal:
        return total_expense * self.profit_loss.marketing

    def admin(self, total_expense: Decimal) -> Decimal:
        return total_expense * self.profit_loss.admin

    def depreciation(self) -> Decimal:
        return self.schedules.depreciation

    def amortization(self) -> Decimal:
        return self.schedules.amortization

    def finance_costs(self) -> Decimal:
        return self.schedules.finance_costs

    def inventory(self, cash: Decimal, receivables: Decimal) -> Decimal:
        return (cash + receivables) * self.balance_sheet.inventory

    def vat_receivable(self, credits: Decimal, debits: Decimal) -> Decimal:
        return max(ZERO, -self.vat_position(credits, debits))

    def vat_payable(self, credits: Decimal, debits: Decimal) -> Decimal:
        return max(ZERO, self.vat_position(credits, debits))

    def vat_position(self, credits: Decimal, debits: Decimal) -> Decimal:
        rate = self.balance_sheet.vat_rate
        return credits * rate - debits * rate

    def non_current_assets(self, current_assets: Decimal) -> dict[str, Decimal]:
        ratios = self.balance_sheet
        return {
            "ppe": current_assets * ratios.ppe,
            "right_of_use": current_assets * ratios.right_of_use,
            "intangibles": current_assets * ratios.intangibles,
        }

    def funding(self, total_assets: Decimal) -> dict[str, Decimal]:
        ratios = self.balance_sheet
        return {
            "owner_capital": total_assets * ratios.owner_capital,
            "long_term_loans": total_assets * ratios.long_term_loans,
            "non_current_lease": total_assets * ratios.non_current_lease,
            "short_term_loans": total_assets * ratios.short_term_loans,
            "current_lease": total_assets * ratios.current_lease,
        }
