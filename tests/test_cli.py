"""Tests for CLI commands."""

import json
from decimal import Decimal

import pytest
from typer.testing import CliRunner

from taxcore.cli import app

runner = CliRunner()


def write_json(path, payload):
    path.write_text(json.dumps(payload))
    return path


@pytest.fixture
def income_file(tmp_path):
    return write_json(tmp_path / "income.json", {"wages": 100000, "total_withholding": 12000})


@pytest.fixture
def lots_file(tmp_path, acme_lots):
    return write_json(
        tmp_path / "lots.json", {"lots": [lot.model_dump(mode="json") for lot in acme_lots]}
    )


class TestCLI:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "taxcore" in result.output

    @pytest.mark.parametrize(
        "command",
        ["estimate", "state-tax", "amt", "schedule-d", "wash-sale", "lots", "quarterly", "harvest"],
    )
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


class TestEstimate:
    def test_text_report(self, income_file):
        result = runner.invoke(app, ["estimate", str(income_file)])
        assert result.exit_code == 0
        assert "Tax Liability Estimate: 2025 (single)" in result.output
        assert "$13,614.00" in result.output

    def test_json(self, income_file):
        result = runner.invoke(app, ["estimate", str(income_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert Decimal(data["total_tax"]) == Decimal("13614")
        assert data["filing_status"] == "single"

    def test_filing_status_and_state(self, income_file):
        result = runner.invoke(
            app, ["estimate", str(income_file), "-s", "MFJ", "--state", "IL", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["filing_status"] == "married_filing_jointly"
        assert data["state_result"]["state_code"] == "IL"

    def test_unrecognized_status_warns(self, income_file):
        result = runner.invoke(app, ["estimate", str(income_file), "-s", "widow"])
        assert result.exit_code == 0
        assert "Warning: Unrecognized filing status" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["estimate", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Error: Input error" in result.output

    def test_invalid_file(self, tmp_path):
        bad = write_json(tmp_path / "bad.json", {"wages": "lots"})
        result = runner.invoke(app, ["estimate", str(bad)])
        assert result.exit_code == 1
        assert "Validation error on 'bad.json'" in result.output


class TestStateTax:
    def test_flat_state(self):
        result = runner.invoke(app, ["state-tax", "IL", "100000"])
        assert result.exit_code == 0
        assert "IL State Tax (flat)" in result.output
        assert "4,950.00" in result.output

    def test_json(self):
        result = runner.invoke(app, ["state-tax", "ma", "1500000", "--json"])
        data = json.loads(result.output)
        assert Decimal(data["state_tax"]) == Decimal("95000")
        assert len(data["brackets"]) == 2

    def test_unsupported(self):
        result = runner.invoke(app, ["state-tax", "ZZ", "100000"])
        assert result.exit_code == 0
        assert "Note: State not supported" in result.output


class TestAmt:
    def test_worksheet(self):
        result = runner.invoke(app, [
            "amt",
            "--taxable-income", "200000",
            "--iso-spread", "300000",
            "--regular-tax", "35000",
        ])
        assert result.exit_code == 0
        assert "$75,366.00" in result.output
        assert "Subject to AMT" in result.output

    def test_json(self):
        result = runner.invoke(app, ["amt", "--taxable-income", "100000", "--json"])
        data = json.loads(result.output)
        assert data["is_subject_to_amt"] is False

    def test_regular_tax_defaults_to_bracket_tax(self):
        result = runner.invoke(app, ["amt", "--taxable-income", "100000"])
        assert result.exit_code == 0
        # 1,192.50 + 4,386.00 + 11,335.50 on $100,000 taxable
        assert "Regular Tax:                $16,914.00" in result.output
        assert "Not subject to AMT." in result.output

    def test_explicit_regular_tax(self):
        result = runner.invoke(
            app, ["amt", "--taxable-income", "100000", "--regular-tax", "0", "--json"]
        )
        data = json.loads(result.output)
        # 26% of the $11,900 base left after the exemption
        assert Decimal(data["alternative_minimum_tax"]) == Decimal("3094")
        assert data["is_subject_to_amt"] is True


class TestScheduleD:
    def test_carryover(self):
        result = runner.invoke(app, ["schedule-d", "--st=-8000"])
        assert result.exit_code == 0
        assert "3,000.00" in result.output
        assert "-5,000.00" in result.output

    def test_json_mfs(self):
        result = runner.invoke(app, ["schedule-d", "--st=-5000", "-s", "MFS", "--json"])
        data = json.loads(result.output)
        assert Decimal(data["capital_loss_deduction"]) == Decimal("1500")
        assert Decimal(data["carryover_to_next_year"]["short_term"]) == Decimal("-3500")


class TestWashSale:
    def test_violation(self, tmp_path):
        path = write_json(tmp_path / "trades.json", {
            "sales": [
                {"lot_id": "lot-sold", "symbol": "ACME", "sale_date": "2025-06-01", "loss": -500}
            ],
            "purchases": [
                {"lot_id": "lot-new", "symbol": "ACME", "purchase_date": "2025-06-15",
                 "quantity": 10}
            ],
        })
        result = runner.invoke(app, ["wash-sale", str(path)])
        assert result.exit_code == 0
        assert "Total disallowed loss: $500.00" in result.output

    def test_clean(self, tmp_path):
        path = write_json(tmp_path / "trades.json", {
            "sales": [
                {"lot_id": "lot-sold", "symbol": "ACME", "sale_date": "2025-06-01", "loss": -500}
            ],
        })
        result = runner.invoke(app, ["wash-sale", str(path)])
        assert result.exit_code == 0
        assert "No wash sales found." in result.output


class TestLots:
    def test_comparison(self, lots_file):
        result = runner.invoke(app, [
            "lots", str(lots_file), "-q", "15", "-p", "120", "--as-of", "2025-06-01",
        ])
        assert result.exit_code == 0
        assert "[FIFO]" in result.output
        assert "[LIFO] (lowest tax impact)" in result.output

    def test_specific_id_added(self, lots_file):
        result = runner.invoke(app, [
            "lots", str(lots_file), "-q", "10", "-p", "120", "--as-of", "2025-06-01",
            "--lot-id", "lot-2024", "--json",
        ])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [r["method"] for r in data] == ["fifo", "lifo", "specific_id"]
        assert data[2]["selected_lots"][0]["lot_id"] == "lot-2024"

    def test_single_method(self, lots_file):
        result = runner.invoke(app, [
            "lots", str(lots_file), "-q", "5", "-p", "120", "--as-of", "2025-06-01",
            "-m", "lifo", "--json",
        ])
        data = json.loads(result.output)
        assert [r["method"] for r in data] == ["lifo"]


class TestQuarterly:
    def test_schedule(self, tmp_path):
        path = write_json(tmp_path / "quarterly.json", {
            "projected_income": {"business_income": 100000},
            "prior_year_tax": 20000,
            "payments_made": [{"quarter": 1, "amount": 5000, "date_paid": "2025-04-10"}],
        })
        result = runner.invoke(app, ["quarterly", str(path), "--as-of", "2025-07-01"])
        assert result.exit_code == 0
        assert "overdue" in result.output
        assert "Underpayment Risk:         medium" in result.output

    def test_json(self, tmp_path):
        path = write_json(tmp_path / "quarterly.json", {
            "projected_income": {"business_income": 100000},
            "prior_year_tax": 20000,
        })
        result = runner.invoke(
            app, ["quarterly", str(path), "--as-of", "2025-03-01", "--json"]
        )
        data = json.loads(result.output)
        assert Decimal(data["total_estimated_tax"]) == Decimal("20000")
        assert len(data["quarters"]) == 4


class TestHarvest:
    @pytest.fixture
    def positions_file(self, tmp_path, acme_position):
        return write_json(
            tmp_path / "positions.json",
            {"positions": [acme_position.model_dump(mode="json")]},
        )

    def test_candidates(self, positions_file):
        result = runner.invoke(app, ["harvest", str(positions_file), "--as-of", "2025-06-01"])
        assert result.exit_code == 0
        assert "ACME has $800.00 unrealized short-term loss." in result.output

    def test_json(self, positions_file):
        result = runner.invoke(
            app, ["harvest", str(positions_file), "--as-of", "2025-06-01", "--json"]
        )
        data = json.loads(result.output)
        assert [c["lot_id"] for c in data] == ["lot-2025", "lot-2024"]

    def test_none_above_threshold(self, positions_file):
        result = runner.invoke(app, [
            "harvest", str(positions_file), "--as-of", "2025-06-01", "--min-loss", "5000",
        ])
        assert result.exit_code == 0
        assert "No harvesting candidates found." in result.output
