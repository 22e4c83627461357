"""Custom exception hierarchy for loan-engine."""


class LoanEngineError(Exception):
    """Base exception for all loan-engine errors."""


class ValidationError(LoanEngineError):
    """Raised when loan terms or a payment are malformed or out of range."""


class PaymentNotFoundError(ValidationError):
    """Raised when a payment id is not part of the loan's payment history."""


class NonConvergentSimulationError(LoanEngineError):
    """Raised when a payoff simulation cannot reach a zero balance."""

    def __init__(self, message: str, scenario: str = "", months: int = 0,
                 remaining_balance: float = 0.0):
        super().__init__(message)
        self.scenario = scenario
        self.months = months
        self.remaining_balance = remaining_balance


class ReconciliationIntegrityError(LoanEngineError):
    """Raised when aggregates derived from the payment history are inconsistent."""


class ConcurrencyConflictError(LoanEngineError):
    """Raised when a loan was modified since the caller read it."""
