"""
Payment reconciliation

The payment history is the source of truth. A loan's aggregate fields are a
cached projection of it and are recomputed from the full history on every
recorded or deleted payment, never incremented or decremented in place.

Callers must serialize apply/remove calls per loan (row version, single
writer, or a transaction that re-reads the history); pass expected_version
to have stale reads rejected with ConcurrencyConflictError.
"""
import math
from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional

from loan_engine.config.constants import (
    EXTERNAL_TERMINAL_STATUSES,
    LoanStatus,
    PaymentMethod,
    PaymentStatus,
)
from loan_engine.config.settings import AMOUNT_PRECISION, BALANCE_TOLERANCE
from loan_engine.core.summary import find_next_payment
from loan_engine.data_manager.data_validator import validate_payment
from loan_engine.data_manager.schema import AmortizationEntry, Loan, LoanAggregates, LoanPayment
from loan_engine.exceptions import (
    ConcurrencyConflictError,
    PaymentNotFoundError,
    ReconciliationIntegrityError,
    ValidationError,
)
from loan_engine.logging import get_logger
from loan_engine.utils.date_utils import parse_date
from loan_engine.utils.id_generator import generate_payment_id

logger = get_logger(__name__)


@dataclass(frozen=True)
class PaymentApplication:
    updated_loan: Loan
    applied_payment: LoanPayment
    payment_history: List[LoanPayment]

    @property
    def interest_to_book(self) -> float:
        """Interest portion for the expense-booking collaborator"""
        return self.applied_payment.interest_amount


def derive_aggregates(
    payment_history: List[LoanPayment],
    principal_amount: float,
) -> LoanAggregates:
    """
    Fold the payment history into loan totals.

    Only paid payments count. Sums are exact (math.fsum), so the result does
    not depend on the order payments were recorded or removed.

    Raises ReconciliationIntegrityError if the history repays more than the
    principal or leaves more than the principal outstanding.
    """
    paid = [p for p in payment_history if p.status == PaymentStatus.PAID.value]

    total_principal = math.fsum(p.principal_amount for p in paid)
    total_interest = math.fsum(p.interest_amount for p in paid)
    total_paid = math.fsum(p.total_payment for p in paid)
    balance = principal_amount - total_principal

    if balance < -BALANCE_TOLERANCE:
        raise ReconciliationIntegrityError(
            f"Payment history repays {total_principal:.2f} against a principal of "
            f"{principal_amount:.2f}"
        )
    if balance > principal_amount + BALANCE_TOLERANCE:
        raise ReconciliationIntegrityError(
            f"Derived balance {balance:.2f} exceeds the principal of {principal_amount:.2f}"
        )
    if abs(balance) <= BALANCE_TOLERANCE:
        balance = 0.0

    return LoanAggregates(
        total_paid=round(total_paid, AMOUNT_PRECISION),
        total_principal_paid=round(total_principal, AMOUNT_PRECISION),
        total_interest_paid=round(total_interest, AMOUNT_PRECISION),
        current_balance=round(balance, AMOUNT_PRECISION),
        paid_payment_count=len(paid),
    )


def _derive_status(current_status: str, balance: float) -> str:
    if current_status in EXTERNAL_TERMINAL_STATUSES:
        return current_status
    return LoanStatus.PAID_OFF.value if balance <= 0 else LoanStatus.ACTIVE.value


def _check_version(loan: Loan, expected_version: Optional[int]):
    if expected_version is not None and loan.version != expected_version:
        raise ConcurrencyConflictError(
            f"Loan {loan.loan_id} is at version {loan.version}, expected {expected_version}"
        )


def _derived(loan: Loan, payment_history: List[LoanPayment]) -> LoanAggregates:
    try:
        return derive_aggregates(payment_history, loan.principal_amount)
    except ReconciliationIntegrityError:
        logger.error("Payment history of loan %s is inconsistent", loan.loan_id,
                     extra={"loan_id": loan.loan_id})
        raise


def _reconciled(loan: Loan, payment_history: List[LoanPayment]) -> Loan:
    agg = _derived(loan, payment_history)
    return replace(
        loan,
        current_balance=agg.current_balance,
        total_paid=agg.total_paid,
        total_principal_paid=agg.total_principal_paid,
        total_interest_paid=agg.total_interest_paid,
        status=_derive_status(loan.status, agg.current_balance),
        version=loan.version + 1,
    )


def apply_payment(
    loan: Loan,
    payment_history: List[LoanPayment],
    new_payment: LoanPayment,
    expected_version: Optional[int] = None,
) -> PaymentApplication:
    """
    Record a payment and re-derive the loan totals from the whole history.

    The principal portion is clamped to the outstanding balance. Nothing the
    caller passed in is mutated; the returned history is a new list.
    """
    _check_version(loan, expected_version)

    payment_date = parse_date(new_payment.payment_date)
    ok, message = validate_payment(
        new_payment.total_payment, payment_date,
        new_payment.principal_amount, new_payment.interest_amount,
    )
    if not ok:
        raise ValidationError(message)
    if loan.status == LoanStatus.CLOSED.value:
        raise ValidationError(f"Loan {loan.loan_id} is closed")
    if any(p.payment_id == new_payment.payment_id for p in payment_history):
        raise ValidationError(f"Payment {new_payment.payment_id} is already recorded")

    outstanding = _derived(loan, payment_history).current_balance
    principal = new_payment.principal_amount
    total = new_payment.total_payment
    if principal > outstanding:
        logger.warning(
            "Clamping principal %.2f of payment %s to outstanding balance %.2f",
            principal, new_payment.payment_id, outstanding,
            extra={"loan_id": loan.loan_id},
        )
        principal = outstanding
        total = round(principal + new_payment.interest_amount, AMOUNT_PRECISION)
        if total <= 0:
            raise ValidationError(f"Loan {loan.loan_id} has no outstanding balance")

    applied = replace(
        new_payment,
        loan_id=loan.loan_id,
        payment_date=payment_date,
        principal_amount=principal,
        total_payment=total,
        status=PaymentStatus.PAID.value,
    )
    history = list(payment_history) + [applied]
    updated = _reconciled(loan, history)

    applied = replace(applied, remaining_balance=updated.current_balance)
    history[-1] = applied

    logger.info(
        "Applied payment %s #%d to loan %s: balance %.2f, status %s",
        applied.payment_id, applied.payment_number, loan.loan_id,
        updated.current_balance, updated.status,
    )
    return PaymentApplication(updated_loan=updated, applied_payment=applied, payment_history=history)


def remove_payment(
    loan: Loan,
    payment_history: List[LoanPayment],
    payment_id: str,
    expected_version: Optional[int] = None,
) -> Loan:
    """Delete a payment and re-derive the loan totals from what remains"""
    _check_version(loan, expected_version)

    remaining = [p for p in payment_history if p.payment_id != payment_id]
    if len(remaining) == len(payment_history):
        raise PaymentNotFoundError(f"Payment {payment_id} not found for loan {loan.loan_id}")

    updated = _reconciled(loan, remaining)
    logger.info(
        "Removed payment %s from loan %s: balance %.2f, status %s",
        payment_id, loan.loan_id, updated.current_balance, updated.status,
    )
    return updated


def build_next_payment(
    loan: Loan,
    schedule: List[AmortizationEntry],
    payment_history: List[LoanPayment],
    payment_date: Optional[date] = None,
    payment_method: Optional[str] = None,
) -> Optional[LoanPayment]:
    """Prefill a payment from the first unpaid schedule entry, None if all are paid"""
    entry = find_next_payment(schedule, payment_history)
    if entry is None:
        return None

    return LoanPayment(
        payment_id=generate_payment_id(),
        loan_id=loan.loan_id,
        payment_number=entry.payment_number,
        payment_date=payment_date or date.today(),
        principal_amount=entry.principal_payment,
        interest_amount=entry.interest_payment,
        total_payment=entry.total_payment,
        payment_method=payment_method or PaymentMethod.BANK_TRANSFER.value,
    )
