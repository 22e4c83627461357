from enum import Enum


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        """Simulated months aggregated into one reported entry"""
        return {
            "monthly": 1,
            "quarterly": 3,
            "yearly": 12,
        }[self.value]


class LoanStatus(str, Enum):
    ACTIVE = "active"
    PAID_OFF = "paid_off"
    DEFAULTED = "defaulted"
    CLOSED = "closed"


class PaymentStatus(str, Enum):
    PAID = "paid"
    SCHEDULED = "scheduled"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    DIRECT_DEBIT = "direct_debit"
    CHECK = "check"
    CASH = "cash"
    CARD = "card"
    OTHER = "other"


# Set by callers; never derived from the payment history
EXTERNAL_TERMINAL_STATUSES = (LoanStatus.DEFAULTED.value, LoanStatus.CLOSED.value)

# Column order for tabular views
SCHEDULE_COLUMNS = [
    "payment_number", "payment_date", "beginning_balance", "total_payment",
    "principal_payment", "interest_payment", "ending_balance",
    "cumulative_interest", "cumulative_principal",
]

AGGREGATE_COLUMNS = [
    "total_paid", "total_principal_paid", "total_interest_paid",
    "current_balance", "paid_payment_count",
]
