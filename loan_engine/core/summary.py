"""Loan progress and portfolio statistics"""
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from loan_engine.config.constants import LoanStatus, PaymentStatus
from loan_engine.config.settings import AMOUNT_PRECISION
from loan_engine.data_manager.schema import (
    AmortizationEntry,
    Loan,
    LoanPayment,
    LoanSummary,
    NextPaymentDue,
)


def calculate_loan_progress(loan: Loan) -> int:
    """Percent of the principal already repaid"""
    if loan.principal_amount == 0:
        return 0
    repaid = loan.principal_amount - loan.current_balance
    return round(repaid / loan.principal_amount * 100)


def find_next_payment(
    schedule: List[AmortizationEntry],
    payments: List[LoanPayment],
) -> Optional[AmortizationEntry]:
    """First schedule entry without a paid payment against it"""
    paid_numbers = {
        p.payment_number for p in payments if p.status == PaymentStatus.PAID.value
    }
    for entry in schedule:
        if entry.payment_number not in paid_numbers:
            return entry
    return None


def is_payment_overdue(due_date: date, today: Optional[date] = None) -> bool:
    return (today or date.today()) > due_date


def calculate_loan_summary(
    loans: List[Loan],
    schedules: Optional[Dict[str, List[AmortizationEntry]]] = None,
    payments: Optional[Dict[str, List[LoanPayment]]] = None,
) -> LoanSummary:
    """
    Totals over the active loans of a portfolio.

    schedules / payments are keyed by loan_id and only used to find the
    earliest upcoming payment. Amounts are summed across currencies as-is;
    the currencies involved are listed on the summary.
    """
    schedules = schedules or {}
    payments = payments or {}
    active = [loan for loan in loans if loan.status == LoanStatus.ACTIVE.value]

    summary = LoanSummary(total_loans=len(loans), active_loans=len(active))
    for loan in active:
        summary.total_principal += loan.principal_amount
        summary.total_balance += loan.current_balance
        summary.total_paid += loan.total_paid
        summary.total_interest_paid += loan.total_interest_paid
        # monthly_payment is already the monthly equivalent for every frequency
        summary.monthly_payment_total += loan.monthly_payment
        if loan.currency not in summary.currencies:
            summary.currencies.append(loan.currency)

        entry = find_next_payment(schedules.get(loan.loan_id, []), payments.get(loan.loan_id, []))
        if entry is None:
            continue
        due = summary.next_payment_due
        if due is None or entry.payment_date < due.due_date:
            summary.next_payment_due = NextPaymentDue(
                due_date=entry.payment_date,
                amount=entry.total_payment,
                loan_name=loan.lender_name or loan.loan_number or loan.loan_id,
            )

    summary.total_principal = round(summary.total_principal, AMOUNT_PRECISION)
    summary.total_balance = round(summary.total_balance, AMOUNT_PRECISION)
    summary.total_paid = round(summary.total_paid, AMOUNT_PRECISION)
    summary.total_interest_paid = round(summary.total_interest_paid, AMOUNT_PRECISION)
    summary.monthly_payment_total = round(summary.monthly_payment_total, AMOUNT_PRECISION)
    return summary


def summarize_schedule(schedule: pd.DataFrame) -> Dict:
    """Key figures of a schedule frame (see schedule_to_frame)"""
    if schedule.empty:
        return {
            "entries": 0,
            "total_payment": 0.0,
            "total_principal": 0.0,
            "total_interest": 0.0,
            "interest_share": 0.0,
            "first_payment_date": None,
            "last_payment_date": None,
        }

    total_payment = schedule["total_payment"].sum()
    total_interest = schedule["interest_payment"].sum()
    return {
        "entries": len(schedule),
        "total_payment": round(float(total_payment), AMOUNT_PRECISION),
        "total_principal": round(float(schedule["principal_payment"].sum()), AMOUNT_PRECISION),
        "total_interest": round(float(total_interest), AMOUNT_PRECISION),
        "interest_share": round(float(total_interest / total_payment * 100), 2) if total_payment > 0 else 0.0,
        "first_payment_date": schedule.iloc[0]["payment_date"],
        "last_payment_date": schedule.iloc[-1]["payment_date"],
    }
