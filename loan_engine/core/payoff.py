"""Early payoff simulation"""
from datetime import date
from typing import Optional, Tuple

from loan_engine.config.settings import AMOUNT_PRECISION, MAX_SIMULATION_MONTHS
from loan_engine.core.calculator import monthly_rate
from loan_engine.data_manager.schema import Loan, PayoffProjection
from loan_engine.exceptions import NonConvergentSimulationError, ValidationError
from loan_engine.logging import get_logger
from loan_engine.utils.date_utils import add_months

logger = get_logger(__name__)


def simulate_months(
    balance: float,
    annual_rate: float,
    payment: float,
    max_months: int = MAX_SIMULATION_MONTHS,
    scenario: str = "baseline",
) -> Tuple[int, float]:
    """
    Pay a fixed amount every month until the balance is gone.
    Returns (months needed, interest paid)

    Raises NonConvergentSimulationError when the payment does not cover the
    first month's interest or the balance is still open after max_months.
    """
    r = monthly_rate(annual_rate)
    if balance > 0 and payment <= balance * r:
        raise NonConvergentSimulationError(
            f"{scenario} payment {payment:.2f} does not cover the monthly interest "
            f"of {balance * r:.2f}",
            scenario=scenario, months=0, remaining_balance=round(balance, AMOUNT_PRECISION),
        )

    months = 0
    total_interest = 0.0
    while balance > 0 and months < max_months:
        interest = balance * r
        principal = payment - interest
        total_interest += interest
        balance -= principal
        months += 1
        if balance < 0:
            balance = 0.0

    if balance > 0:
        raise NonConvergentSimulationError(
            f"{scenario} simulation still owes {balance:.2f} after {months} months",
            scenario=scenario, months=months, remaining_balance=round(balance, AMOUNT_PRECISION),
        )
    return months, total_interest


def simulate_payoff(
    loan: Loan,
    extra_monthly_payment: float,
    as_of: Optional[date] = None,
    max_months: int = MAX_SIMULATION_MONTHS,
) -> PayoffProjection:
    """
    Project how an extra monthly payment shortens the loan.

    Both scenarios run in monthly steps from the loan's current balance at its
    nominal monthly rate, whatever the payment frequency. Payoff dates count
    from as_of (today by default).
    """
    if extra_monthly_payment is None or extra_monthly_payment < 0:
        raise ValidationError("Extra monthly payment cannot be negative")

    today = as_of or date.today()
    balance = float(loan.current_balance)

    original_months, original_interest = simulate_months(
        balance, loan.interest_rate, loan.monthly_payment, max_months, "baseline",
    )
    new_months, new_interest = simulate_months(
        balance, loan.interest_rate, loan.monthly_payment + extra_monthly_payment,
        max_months, "accelerated",
    )

    projection = PayoffProjection(
        months_saved=original_months - new_months,
        interest_saved=round(original_interest - new_interest, AMOUNT_PRECISION),
        original_payoff_date=add_months(today, original_months),
        new_payoff_date=add_months(today, new_months),
        original_months=original_months,
        new_months=new_months,
        original_interest=round(original_interest, AMOUNT_PRECISION),
        new_interest=round(new_interest, AMOUNT_PRECISION),
    )
    logger.debug(
        "Payoff simulation for %s: extra %.2f saves %d months and %.2f interest",
        loan.loan_id, extra_monthly_payment, projection.months_saved, projection.interest_saved,
    )
    return projection
