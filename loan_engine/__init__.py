"""Loan amortization, payoff simulation and payment reconciliation."""

__version__ = "0.1.0"
