"""Command line tests"""
from click.testing import CliRunner

from loan_engine.cli import cli


def _run(*args):
    return CliRunner().invoke(cli, list(args))


class TestMonthlyPayment:
    def test_monthly(self):
        result = _run("monthly-payment", "--principal", "10000", "--annual-rate", "6", "--term-months", "12")
        assert result.exit_code == 0
        assert "Monthly payment: 860.66" in result.output

    def test_quarterly_installment(self):
        result = _run("monthly-payment", "--principal", "10000", "--annual-rate", "6",
                      "--term-months", "12", "--frequency", "quarterly")
        assert "Payment per quarterly period: 2581.98" in result.output

    def test_invalid_terms(self):
        result = _run("monthly-payment", "--principal", "10000", "--annual-rate", "6", "--term-months", "0")
        assert result.exit_code != 0
        assert "Loan term" in result.output


class TestSchedule:
    def test_prints_table(self):
        result = _run("schedule", "--principal", "10000", "--annual-rate", "6",
                      "--term-months", "12", "--first-payment-date", "2024-02-01")
        assert result.exit_code == 0
        assert "payment_number" in result.output
        assert "2025-01-01" in result.output
        assert "Total interest:" in result.output

    def test_quarterly(self):
        result = _run("schedule", "--principal", "10000", "--annual-rate", "6", "--term-months", "12",
                      "--first-payment-date", "2024-02-01", "--frequency", "quarterly")
        assert result.exit_code == 0
        assert "2024-11-01" in result.output
        assert "2024-03-01" not in result.output

    def test_rejects_bad_rate(self):
        result = _run("schedule", "--principal", "10000", "--annual-rate", "120",
                      "--term-months", "12", "--first-payment-date", "2024-02-01")
        assert result.exit_code != 0
        assert "Interest rate" in result.output


class TestSimulatePayoff:
    def test_no_extra(self):
        result = _run("simulate-payoff", "--principal", "10000", "--annual-rate", "6",
                      "--term-months", "12", "--extra", "0", "--as-of", "2024-01-01")
        assert result.exit_code == 0
        assert "Months saved: 0" in result.output
        assert "Interest saved: 0.00" in result.output

    def test_non_convergent(self):
        result = _run("simulate-payoff", "--principal", "10000", "--annual-rate", "6", "--term-months", "12",
                      "--balance", "1000000", "--extra", "0")
        assert result.exit_code != 0
        assert "does not cover" in result.output

    def test_cap_from_environment(self):
        result = CliRunner().invoke(
            cli,
            ["simulate-payoff", "--principal", "10000", "--annual-rate", "6",
             "--term-months", "12", "--extra", "0"],
            env={"LOAN_ENGINE_MAX_SIMULATION_MONTHS": "3"},
        )
        assert result.exit_code != 0
        assert "after 3 months" in result.output


class TestReconcile:
    def test_derives_totals(self, tmp_path):
        csv = tmp_path / "payments.csv"
        csv.write_text(
            "payment_id,payment_number,payment_date,principal_amount,interest_amount,total_payment,status\n"
            "a,1,2024-02-01,810.66,50.00,860.66,paid\n"
            "b,2,2024-03-01,814.71,45.95,860.66,paid\n"
            "c,3,2024-04-01,818.78,41.88,860.66,scheduled\n"
        )
        result = _run("reconcile", "--principal", "10000", "--payments-file", str(csv))
        assert result.exit_code == 0
        assert "8374.63" in result.output
        assert "1721.32" in result.output

    def test_overpaid_history(self, tmp_path):
        csv = tmp_path / "payments.csv"
        csv.write_text("principal_amount,interest_amount\n700,0\n700,0\n")
        result = _run("reconcile", "--principal", "1000", "--payments-file", str(csv))
        assert result.exit_code != 0
        assert "repays" in result.output
