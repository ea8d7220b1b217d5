"""SmartSpend — personal finance tracking for expenses, bills and warranties."""

__version__ = "0.1.0"
