"""Core amortization math: annuity payment, per-period amounts, remaining term"""
import math
from datetime import date

from loan_engine.config.constants import PaymentFrequency
from loan_engine.config.settings import AMOUNT_PRECISION
from loan_engine.exceptions import NonConvergentSimulationError
from loan_engine.utils.date_utils import add_months


def monthly_rate(annual_rate: float) -> float:
    """Nominal monthly rate: annual % / 100 / 12"""
    return annual_rate / 100 / 12


def calc_monthly_payment(
    principal: float,
    annual_rate: float,
    term_months: int,
) -> float:
    """Monthly annuity payment: P * c / (1 - (1+c)^-n)"""
    if annual_rate == 0:
        return round(principal / term_months, AMOUNT_PRECISION)
    r = monthly_rate(annual_rate)
    # (1+r)^-n stays finite however long the term
    payment = principal * r / (1 - (1 + r) ** -term_months)
    return round(payment, AMOUNT_PRECISION)


def covers_interest(principal: float, annual_rate: float, payment: float) -> bool:
    """True when the payment repays some principal in the first month"""
    return payment > principal * monthly_rate(annual_rate)


def calc_payment_amount(
    principal: float,
    annual_rate: float,
    term_months: int,
    frequency: str,
) -> float:
    """Installment per reported period (monthly payment x months in the period)"""
    monthly = calc_monthly_payment(principal, annual_rate, term_months)
    return round(monthly * PaymentFrequency(frequency).months, AMOUNT_PRECISION)


def get_total_payments(term_months: int, frequency: str) -> int:
    """Number of reported schedule entries"""
    return math.ceil(term_months / PaymentFrequency(frequency).months)


def get_next_payment_date(current: date, frequency: str) -> date:
    return add_months(current, PaymentFrequency(frequency).months)


def calc_remaining_term(
    balance: float,
    annual_rate: float,
    monthly_payment: float,
) -> int:
    """Months left to repay balance at a fixed payment.

    Solves M = B * r(1+r)^n / ((1+r)^n - 1) for n:
    n = -ln(1 - B*r/M) / ln(1+r)
    """
    if balance <= 0:
        return 0
    if monthly_payment <= 0:
        raise NonConvergentSimulationError(
            "Monthly payment must be positive to repay the balance",
            months=0, remaining_balance=balance,
        )
    r = monthly_rate(annual_rate)
    if r == 0:
        return math.ceil(balance / monthly_payment)
    ratio = balance * r / monthly_payment
    if ratio >= 1:
        raise NonConvergentSimulationError(
            f"Monthly payment {monthly_payment:.2f} does not cover the interest "
            f"of {balance * r:.2f}",
            months=0, remaining_balance=balance,
        )
    return max(math.ceil(-math.log(1 - ratio) / math.log(1 + r)), 1)
