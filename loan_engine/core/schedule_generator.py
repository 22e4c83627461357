"""
Amortization schedule generator

Loan terms are simulated month by month at the nominal monthly rate; the
reporting frequency only decides how many simulated months are folded into
one schedule entry. Schedules are regenerated wholesale whenever the loan
terms change, never patched.
"""
from datetime import date
from typing import List, Optional

import pandas as pd

from loan_engine.config.constants import PaymentFrequency, SCHEDULE_COLUMNS
from loan_engine.config.settings import AMOUNT_PRECISION
from loan_engine.core.calculator import (
    calc_monthly_payment,
    covers_interest,
    get_total_payments,
    monthly_rate,
)
from loan_engine.data_manager.data_validator import validate_schedule_terms
from loan_engine.data_manager.schema import AmortizationEntry
from loan_engine.exceptions import ValidationError
from loan_engine.logging import get_logger
from loan_engine.utils.date_utils import add_months, parse_date

logger = get_logger(__name__)


def _round(value: float) -> float:
    return round(value, AMOUNT_PRECISION)


def generate_schedule(
    principal: float,
    annual_rate: float,
    term_months: int,
    first_payment_date: date,
    frequency: str = PaymentFrequency.MONTHLY.value,
) -> List[AmortizationEntry]:
    """
    Generate the full amortization schedule of a loan

    Args:
        principal: amount borrowed, > 0
        annual_rate: annual nominal rate in percent, 0-100
        term_months: loan term in months, >= 1
        first_payment_date: due date of entry 1
        frequency: monthly / quarterly / yearly reporting granularity

    Returns:
        entries ordered by payment_number; the last one ends at 0.00

    Raises:
        ValidationError: the terms are out of range
    """
    ok, message = validate_schedule_terms(principal, annual_rate, term_months, frequency)
    if not ok:
        raise ValidationError(message)
    first_payment_date = parse_date(first_payment_date)
    if first_payment_date is None:
        raise ValidationError("First payment date is required")

    term_months = int(term_months)
    months_per_entry = PaymentFrequency(frequency).months
    total_entries = get_total_payments(term_months, frequency)

    r = monthly_rate(annual_rate)
    payment = calc_monthly_payment(principal, annual_rate, term_months)
    if not covers_interest(principal, annual_rate, payment):
        raise ValidationError(
            f"Rounded monthly payment {payment:.2f} does not repay a principal of "
            f"{principal:.2f} over {term_months} months"
        )

    schedule = []
    balance = float(principal)
    cum_principal = 0.0
    cum_interest = 0.0
    month = 0

    for i in range(total_entries):
        beginning = balance
        entry_interest = 0.0
        entry_principal = 0.0

        months_in_entry = min(months_per_entry, term_months - month)
        for _ in range(months_in_entry):
            interest = balance * r
            prin = payment - interest
            entry_interest += interest
            entry_principal += prin
            balance -= prin
            month += 1

        # Final entry absorbs the rounding drift of the payment
        if i == total_entries - 1:
            entry_principal = beginning
            balance = 0.0
        elif balance < 0:
            balance = 0.0
            entry_principal = beginning

        entry_total = entry_principal + entry_interest
        cum_principal += entry_principal
        cum_interest += entry_interest

        schedule.append(AmortizationEntry(
            payment_number=i + 1,
            payment_date=add_months(first_payment_date, i * months_per_entry),
            beginning_balance=_round(beginning),
            total_payment=_round(entry_total),
            principal_payment=_round(entry_principal),
            interest_payment=_round(entry_interest),
            ending_balance=_round(balance),
            cumulative_interest=_round(cum_interest),
            cumulative_principal=_round(cum_principal),
        ))

    logger.debug(
        "Generated %d %s entries for principal %.2f at %.4f%% over %d months",
        len(schedule), PaymentFrequency(frequency).value, principal, annual_rate, term_months,
    )
    return schedule


def calculate_total_interest(
    principal: float,
    annual_rate: float,
    term_months: int,
    first_payment_date: Optional[date] = None,
    frequency: str = PaymentFrequency.MONTHLY.value,
) -> float:
    """Total interest over the life of the loan"""
    schedule = generate_schedule(
        principal, annual_rate, term_months,
        first_payment_date or date.today(), frequency,
    )
    return schedule[-1].cumulative_interest if schedule else 0.0


def schedule_to_frame(schedule: List[AmortizationEntry]) -> pd.DataFrame:
    """Tabular view of a schedule, one row per entry"""
    records = [
        {col: getattr(entry, col) for col in SCHEDULE_COLUMNS}
        for entry in schedule
    ]
    return pd.DataFrame(records, columns=SCHEDULE_COLUMNS)
