"""Pytest configuration and fixtures."""
import logging
import math
from dataclasses import replace
from datetime import date

import pytest

from loan_engine.core.schedule_generator import generate_schedule
from loan_engine.data_manager.loan_factory import create_loan
from loan_engine.data_manager.schema import LoanPayment


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging replaces root handlers; put them back after each test"""
    root = logging.getLogger()
    engine = logging.getLogger("loan_engine")
    handlers = root.handlers[:]
    level, engine_level = root.level, engine.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    engine.setLevel(engine_level)


@pytest.fixture
def loan():
    """10000 at 6% over 12 months, paid monthly"""
    return create_loan(
        principal_amount=10000,
        interest_rate=6.0,
        term_months=12,
        start_date=date(2024, 1, 1),
        first_payment_date=date(2024, 2, 1),
        lender_name="First Bank",
        loan_number="L-001",
        loan_id="loan-001",
    )


@pytest.fixture
def schedule(loan):
    return generate_schedule(
        loan.principal_amount, loan.interest_rate, loan.term_months,
        loan.first_payment_date, loan.payment_frequency,
    )


@pytest.fixture
def make_payment():
    """Factory for payments against loan-001"""
    def _make(payment_id, payment_number, principal, interest, payment_date=date(2024, 2, 1), **kwargs):
        return LoanPayment(
            payment_id=payment_id,
            loan_id="loan-001",
            payment_number=payment_number,
            payment_date=payment_date,
            principal_amount=principal,
            interest_amount=interest,
            total_payment=round(principal + interest, 2),
            **kwargs,
        )
    return _make


@pytest.fixture
def scheduled_payments(schedule, make_payment):
    """One payment per schedule entry; the last one pays exactly what is left"""
    payments = [
        make_payment(
            f"pay-{entry.payment_number:03d}", entry.payment_number,
            entry.principal_payment, entry.interest_payment, entry.payment_date,
        )
        for entry in schedule
    ]
    rest = round(10000 - math.fsum(p.principal_amount for p in payments[:-1]), 2)
    last = payments[-1]
    payments[-1] = replace(last, principal_amount=rest, total_payment=round(rest + last.interest_amount, 2))
    return payments
