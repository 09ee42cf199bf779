"""Output formatters for pull request listings."""

from .base import BaseFormatter
from .json_formatter import JsonFormatter
from .table_formatter import TableFormatter

__all__ = ["BaseFormatter", "JsonFormatter", "TableFormatter"]
