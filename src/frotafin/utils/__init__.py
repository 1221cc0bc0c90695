"""Utility functions for frotafin."""

from frotafin.utils.amount_parser import parse_amount
from frotafin.utils.date_parser import get_date_range, parse_date

__all__ = ["parse_date", "get_date_range", "parse_amount"]
