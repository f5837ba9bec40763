"""Payroll administration backend: payroll processing and time aggregation engine."""

__version__ = "0.1.0"
