from datetime import date
from typing import Optional

from loan_engine.config.constants import LoanStatus, PaymentFrequency
from loan_engine.config.settings import AMOUNT_PRECISION, DEFAULT_CURRENCY
from loan_engine.core.calculator import calc_monthly_payment, covers_interest
from loan_engine.data_manager.data_validator import validate_loan_data
from loan_engine.data_manager.schema import Loan
from loan_engine.exceptions import ValidationError
from loan_engine.utils.date_utils import parse_date
from loan_engine.utils.id_generator import generate_loan_id


def create_loan(
    principal_amount: float,
    interest_rate: float,
    term_months: int,
    start_date: date,
    first_payment_date: date,
    payment_frequency: str = PaymentFrequency.MONTHLY.value,
    currency: str = DEFAULT_CURRENCY,
    lender_name: str = "",
    loan_number: str = "",
    loan_id: Optional[str] = None,
) -> Loan:
    """New loan with nothing repaid yet; raises ValidationError listing every problem"""
    start_date = parse_date(start_date)
    first_payment_date = parse_date(first_payment_date)
    ok, errors = validate_loan_data(
        principal_amount, interest_rate, term_months, payment_frequency,
        start_date, first_payment_date,
    )
    if not ok:
        raise ValidationError("; ".join(errors))

    term_months = int(term_months)
    monthly_payment = calc_monthly_payment(principal_amount, interest_rate, term_months)
    if not covers_interest(principal_amount, interest_rate, monthly_payment):
        raise ValidationError(
            f"Rounded monthly payment {monthly_payment:.2f} does not repay a principal of "
            f"{principal_amount:.2f} over {term_months} months"
        )

    return Loan(
        loan_id=loan_id or generate_loan_id(),
        principal_amount=round(float(principal_amount), AMOUNT_PRECISION),
        interest_rate=float(interest_rate),
        term_months=term_months,
        payment_frequency=PaymentFrequency(payment_frequency).value,
        start_date=start_date,
        first_payment_date=first_payment_date,
        monthly_payment=monthly_payment,
        current_balance=round(float(principal_amount), AMOUNT_PRECISION),
        currency=currency,
        status=LoanStatus.ACTIVE.value,
        lender_name=lender_name,
        loan_number=loan_number,
    )
