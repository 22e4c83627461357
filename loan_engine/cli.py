import click
import pandas as pd
from dataclasses import asdict, replace
from datetime import datetime

from loan_engine.config.constants import AGGREGATE_COLUMNS, PaymentFrequency, PaymentStatus
from loan_engine.config.settings import EngineSettings
from loan_engine.core.calculator import calc_monthly_payment, calc_payment_amount
from loan_engine.core.payoff import simulate_payoff
from loan_engine.core.reconciler import derive_aggregates
from loan_engine.core.schedule_generator import generate_schedule, schedule_to_frame
from loan_engine.core.summary import summarize_schedule
from loan_engine.data_manager.data_validator import validate_schedule_terms
from loan_engine.data_manager.loan_factory import create_loan
from loan_engine.data_manager.schema import LoanPayment
from loan_engine.exceptions import LoanEngineError
from loan_engine.logging import setup_logging
from loan_engine.utils.date_utils import parse_date

FREQUENCIES = [e.value for e in PaymentFrequency]


def _parse_day(value):
    return datetime.strptime(value, '%Y-%m-%d').date()


def _value(row: dict, key: str, default=None):
    value = row.get(key)
    return default if value is None or pd.isna(value) else value


def _payments_from_frame(df: pd.DataFrame, loan_id: str):
    """Payment records from a CSV frame; missing ids and numbers fall back to the row number"""
    payments = []
    for i, row in enumerate(df.to_dict("records"), start=1):
        principal = float(_value(row, "principal_amount", 0.0))
        interest = float(_value(row, "interest_amount", 0.0))
        payments.append(LoanPayment(
            payment_id=str(_value(row, "payment_id", f"row-{i}")),
            loan_id=loan_id,
            payment_number=int(_value(row, "payment_number", i)),
            payment_date=parse_date(_value(row, "payment_date")),
            principal_amount=principal,
            interest_amount=interest,
            total_payment=float(_value(row, "total_payment", principal + interest)),
            status=str(_value(row, "status", PaymentStatus.PAID.value)),
        ))
    return payments


@click.group()
@click.option('--log-level', type=str, default=None, help='Log level (defaults to LOAN_ENGINE_LOG_LEVEL or INFO)')
@click.pass_context
def cli(ctx, log_level):
    """Loan amortization, payoff simulation and payment reconciliation."""
    settings = EngineSettings.from_env()
    if log_level:
        settings.log_level = log_level
    setup_logging(settings.log_level, settings.log_format)
    ctx.obj = settings


@cli.command('monthly-payment')
@click.option('--principal', type=float, required=True, help='Loan principal')
@click.option('--annual-rate', type=float, required=True, help='Annual interest rate (%)')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
@click.option('--frequency', type=click.Choice(FREQUENCIES), default='monthly', help='Payment frequency')
def monthly_payment_command(principal, annual_rate, term_months, frequency):
    """Calculates the monthly payment and the installment per period."""
    ok, message = validate_schedule_terms(principal, annual_rate, term_months, frequency)
    if not ok:
        raise click.ClickException(message)
    monthly = calc_monthly_payment(principal, annual_rate, term_months)
    installment = calc_payment_amount(principal, annual_rate, term_months, frequency)
    click.echo(f"Monthly payment: {monthly:.2f}")
    click.echo(f"Payment per {frequency} period: {installment:.2f}")


@cli.command('schedule')
@click.option('--principal', type=float, required=True, help='Loan principal')
@click.option('--annual-rate', type=float, required=True, help='Annual interest rate (%)')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
@click.option('--first-payment-date', type=str, required=True, help='First payment date (YYYY-MM-DD)')
@click.option('--frequency', type=click.Choice(FREQUENCIES), default='monthly', help='Payment frequency')
def schedule_command(principal, annual_rate, term_months, first_payment_date, frequency):
    """Generates an amortization schedule and prints it as a table."""
    try:
        schedule = generate_schedule(
            principal, annual_rate, term_months, _parse_day(first_payment_date), frequency,
        )
    except (LoanEngineError, ValueError) as e:
        raise click.ClickException(str(e))
    frame = schedule_to_frame(schedule)
    click.echo(frame.to_string(index=False))
    totals = summarize_schedule(frame)
    click.echo(f"\nTotal paid: {totals['total_payment']:.2f}")
    click.echo(f"Total interest: {totals['total_interest']:.2f}")


@cli.command('simulate-payoff')
@click.option('--principal', type=float, required=True, help='Original loan principal')
@click.option('--annual-rate', type=float, required=True, help='Annual interest rate (%)')
@click.option('--term-months', type=int, required=True, help='Loan term in months')
@click.option('--balance', type=float, default=None, help='Current balance (defaults to the principal)')
@click.option('--extra', type=float, required=True, help='Extra amount paid every month')
@click.option('--as-of', type=str, default=None, help='Simulation start date (YYYY-MM-DD), defaults to today')
@click.pass_obj
def simulate_payoff_command(settings, principal, annual_rate, term_months, balance, extra, as_of):
    """Projects the months and interest saved by an extra monthly payment."""
    try:
        start = _parse_day(as_of) if as_of else datetime.today().date()
        loan = create_loan(principal, annual_rate, term_months, start, start, loan_id="cli")
        if balance is not None:
            loan = replace(loan, current_balance=balance)
        projection = simulate_payoff(loan, extra, as_of=start, max_months=settings.max_simulation_months)
    except (LoanEngineError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Monthly payment: {loan.monthly_payment:.2f}")
    click.echo(f"Months saved: {projection.months_saved}")
    click.echo(f"Interest saved: {projection.interest_saved:.2f}")
    click.echo(f"Original payoff date: {projection.original_payoff_date.isoformat()}")
    click.echo(f"New payoff date: {projection.new_payoff_date.isoformat()}")


@cli.command('reconcile')
@click.option('--principal', type=float, required=True, help='Original loan principal')
@click.option('--payments-file', type=click.Path(exists=True), required=True, help='CSV file with the payment history')
@click.option('--loan-id', type=str, default='cli', help='Loan ID')
def reconcile_command(principal, payments_file, loan_id):
    """Re-derives loan totals from a payment history CSV."""
    try:
        payments = _payments_from_frame(pd.read_csv(payments_file), loan_id)
        aggregates = derive_aggregates(payments, principal)
    except (LoanEngineError, ValueError, KeyError) as e:
        raise click.ClickException(str(e))
    frame = pd.DataFrame([asdict(aggregates)], columns=AGGREGATE_COLUMNS)
    click.echo(frame.to_string(index=False))


if __name__ == "__main__":
    cli()
