import os
from dataclasses import dataclass

# Money precision (decimal places)
AMOUNT_PRECISION = 2

# Annual interest rate bounds (%)
MIN_INTEREST_RATE = 0.0
MAX_INTEREST_RATE = 100.0

# Payoff simulation safety cap: 50 years of monthly steps
MAX_SIMULATION_MONTHS = 600

# Residual balance treated as fully repaid
BALANCE_TOLERANCE = 0.005

DEFAULT_CURRENCY = "USD"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "standard"


@dataclass
class EngineSettings:
    """Runtime settings for the command line tool."""

    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    max_simulation_months: int = MAX_SIMULATION_MONTHS

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Create settings from environment variables."""
        return cls(
            log_level=os.getenv("LOAN_ENGINE_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            log_format=os.getenv("LOAN_ENGINE_LOG_FORMAT", DEFAULT_LOG_FORMAT),
            max_simulation_months=int(
                os.getenv("LOAN_ENGINE_MAX_SIMULATION_MONTHS", str(MAX_SIMULATION_MONTHS))
            ),
        )
