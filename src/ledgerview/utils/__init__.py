"""Utility functions for ledgerview."""

from ledgerview.utils.date_parser import parse_date, parse_timestamp
from ledgerview.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_timestamp", "parse_amount"]
