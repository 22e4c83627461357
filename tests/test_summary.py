"""Loan progress and portfolio summary tests"""
from dataclasses import replace
from datetime import date

from loan_engine.core.schedule_generator import generate_schedule, schedule_to_frame
from loan_engine.core.summary import (
    calculate_loan_progress,
    calculate_loan_summary,
    find_next_payment,
    is_payment_overdue,
    summarize_schedule,
)
from loan_engine.config.constants import LoanStatus, PaymentStatus
from loan_engine.data_manager.loan_factory import create_loan


class TestProgress:
    def test_new_loan(self, loan):
        assert calculate_loan_progress(loan) == 0

    def test_partly_repaid(self, loan):
        assert calculate_loan_progress(replace(loan, current_balance=2500.0)) == 75

    def test_repaid(self, loan):
        assert calculate_loan_progress(replace(loan, current_balance=0.0)) == 100


class TestNextPayment:
    def test_first_entry_when_nothing_paid(self, schedule):
        assert find_next_payment(schedule, []).payment_number == 1

    def test_skips_paid(self, schedule, scheduled_payments):
        assert find_next_payment(schedule, scheduled_payments[:5]).payment_number == 6

    def test_scheduled_payments_do_not_count(self, schedule, scheduled_payments):
        pending = [replace(p, status=PaymentStatus.SCHEDULED.value) for p in scheduled_payments[:2]]
        assert find_next_payment(schedule, pending).payment_number == 1

    def test_none_when_all_paid(self, schedule, scheduled_payments):
        assert find_next_payment(schedule, scheduled_payments) is None


class TestOverdue:
    def test_past_due(self):
        assert is_payment_overdue(date(2024, 1, 1), today=date(2024, 1, 2))

    def test_due_today(self):
        assert not is_payment_overdue(date(2024, 1, 1), today=date(2024, 1, 1))


class TestLoanSummary:
    def _portfolio(self):
        car = create_loan(10000, 6.0, 12, date(2024, 1, 1), date(2024, 2, 1),
                          lender_name="Car Finance", loan_id="car")
        van = create_loan(24000, 0, 24, date(2024, 1, 1), date(2024, 1, 20),
                          payment_frequency="quarterly", lender_name="Van Lease", loan_id="van")
        old = create_loan(5000, 5.0, 12, date(2022, 1, 1), date(2022, 2, 1), loan_id="old")
        old = replace(old, current_balance=0.0, total_paid=5130.0, status=LoanStatus.PAID_OFF.value)
        return [car, van, old]

    def test_totals_over_active_loans(self):
        summary = calculate_loan_summary(self._portfolio())
        assert summary.total_loans == 3
        assert summary.active_loans == 2
        assert summary.total_principal == 34000.0
        assert summary.total_balance == 34000.0
        assert summary.total_paid == 0.0
        assert summary.monthly_payment_total == 1860.66
        assert summary.currencies == ["USD"]
        assert summary.next_payment_due is None

    def test_earliest_next_payment(self):
        loans = self._portfolio()
        schedules = {
            loan.loan_id: generate_schedule(
                loan.principal_amount, loan.interest_rate, loan.term_months,
                loan.first_payment_date, loan.payment_frequency,
            )
            for loan in loans
        }
        summary = calculate_loan_summary(loans, schedules)
        assert summary.next_payment_due.due_date == date(2024, 1, 20)
        assert summary.next_payment_due.amount == 3000.0
        assert summary.next_payment_due.loan_name == "Van Lease"

    def test_empty_portfolio(self):
        summary = calculate_loan_summary([])
        assert summary.total_loans == 0
        assert summary.monthly_payment_total == 0.0


class TestSummarizeSchedule:
    def test_totals(self, schedule):
        totals = summarize_schedule(schedule_to_frame(schedule))
        assert totals["entries"] == 12
        assert abs(totals["total_principal"] - 10000) <= 0.12
        assert 320 < totals["total_interest"] < 335
        assert totals["first_payment_date"] == date(2024, 2, 1)
        assert 0 < totals["interest_share"] < 5

    def test_empty(self):
        totals = summarize_schedule(schedule_to_frame([]))
        assert totals["entries"] == 0
        assert totals["total_payment"] == 0.0
