"""Expense splitting: policies, calculator, validator and suggestions."""
