from datetime import date
from typing import List, Optional, Tuple

from loan_engine.config.constants import PaymentFrequency, PaymentStatus
from loan_engine.config.settings import MAX_INTEREST_RATE, MIN_INTEREST_RATE


def validate_schedule_terms(
    principal: float,
    annual_rate: float,
    term_months: int,
    frequency: str,
) -> Tuple[bool, str]:
    """Check the inputs of schedule generation, returns (ok, error message)"""
    if principal is None or principal <= 0:
        return False, "Principal amount must be greater than 0"

    if annual_rate is None or not MIN_INTEREST_RATE <= annual_rate <= MAX_INTEREST_RATE:
        return False, "Interest rate must be between 0 and 100"

    if term_months is None or int(term_months) != term_months or term_months < 1:
        return False, "Loan term must be a whole number of months greater than 0"

    if frequency not in [e.value for e in PaymentFrequency]:
        return False, f"Invalid payment frequency: {frequency}"

    return True, ""


def validate_loan_data(
    principal: float,
    annual_rate: float,
    term_months: int,
    frequency: str,
    start_date: Optional[date],
    first_payment_date: Optional[date],
    lender_name: Optional[str] = None,
) -> Tuple[bool, List[str]]:
    """Check a complete loan record, returns (ok, every error found)"""
    errors = []

    if lender_name is not None and not lender_name.strip():
        errors.append("Lender name is required")

    if principal is None or principal <= 0:
        errors.append("Principal amount must be greater than 0")

    if annual_rate is None or not MIN_INTEREST_RATE <= annual_rate <= MAX_INTEREST_RATE:
        errors.append("Interest rate must be between 0 and 100")

    if term_months is None or term_months <= 0:
        errors.append("Loan term must be greater than 0")
    elif int(term_months) != term_months:
        errors.append("Loan term must be a whole number of months")

    if frequency not in [e.value for e in PaymentFrequency]:
        errors.append(f"Invalid payment frequency: {frequency}")

    if start_date is None:
        errors.append("Start date is required")

    if first_payment_date is None:
        errors.append("First payment date is required")

    if start_date is not None and first_payment_date is not None:
        if first_payment_date < start_date:
            errors.append("First payment date must be on or after start date")

    return len(errors) == 0, errors


def validate_payment(
    total_payment: float,
    payment_date: Optional[date],
    principal_amount: float,
    interest_amount: float,
    status: str = PaymentStatus.PAID.value,
) -> Tuple[bool, str]:
    """Check a payment before it is applied to a loan"""
    if total_payment is None or total_payment <= 0:
        return False, "Total payment must be greater than 0"

    if payment_date is None:
        return False, "Payment date is required"

    if principal_amount is None or principal_amount < 0:
        return False, "Principal amount cannot be negative"

    if interest_amount is None or interest_amount < 0:
        return False, "Interest amount cannot be negative"

    if status not in [e.value for e in PaymentStatus]:
        return False, f"Invalid payment status: {status}"

    return True, ""
