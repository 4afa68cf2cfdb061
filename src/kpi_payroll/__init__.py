"""KPI payroll engine for an accounting firm's client portfolio."""

__version__ = "0.1.0"
