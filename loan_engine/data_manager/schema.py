from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from loan_engine.config.constants import LoanStatus, PaymentMethod, PaymentStatus
from loan_engine.config.settings import DEFAULT_CURRENCY


@dataclass
class Loan:
    loan_id: str
    principal_amount: float
    interest_rate: float  # annual %, e.g. 6.0
    term_months: int
    payment_frequency: str  # monthly / quarterly / yearly
    start_date: date
    first_payment_date: date
    monthly_payment: float  # monthly-equivalent, computed from term_months
    current_balance: float
    currency: str = DEFAULT_CURRENCY
    total_paid: float = 0.0
    total_principal_paid: float = 0.0
    total_interest_paid: float = 0.0
    status: str = LoanStatus.ACTIVE.value
    lender_name: str = ""
    loan_number: str = ""
    version: int = 0


@dataclass(frozen=True)
class AmortizationEntry:
    payment_number: int
    payment_date: date
    beginning_balance: float
    total_payment: float
    principal_payment: float
    interest_payment: float
    ending_balance: float
    cumulative_interest: float
    cumulative_principal: float


@dataclass
class LoanPayment:
    payment_id: str
    loan_id: str
    payment_number: int
    payment_date: Optional[date]
    principal_amount: float
    interest_amount: float
    total_payment: float
    remaining_balance: float = 0.0
    payment_method: str = PaymentMethod.BANK_TRANSFER.value
    status: str = PaymentStatus.PAID.value
    proof_url: Optional[str] = None
    notes: str = ""


@dataclass(frozen=True)
class LoanAggregates:
    total_paid: float
    total_principal_paid: float
    total_interest_paid: float
    current_balance: float
    paid_payment_count: int = 0


@dataclass(frozen=True)
class PayoffProjection:
    months_saved: int
    interest_saved: float
    original_payoff_date: date
    new_payoff_date: date
    original_months: int = 0
    new_months: int = 0
    original_interest: float = 0.0
    new_interest: float = 0.0


@dataclass(frozen=True)
class NextPaymentDue:
    due_date: date
    amount: float
    loan_name: str


@dataclass
class LoanSummary:
    total_loans: int = 0
    active_loans: int = 0
    total_principal: float = 0.0
    total_balance: float = 0.0
    total_paid: float = 0.0
    total_interest_paid: float = 0.0
    monthly_payment_total: float = 0.0
    next_payment_due: Optional[NextPaymentDue] = None
    currencies: list = field(default_factory=list)
