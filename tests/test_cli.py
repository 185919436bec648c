# tests/test_cli.py
import json
from pathlib import Path
from typing import Generator

import pytest
from typer.testing import CliRunner

from easybook.chaincode import Gateway
from easybook.cli.main import app

runner = CliRunner()


@pytest.fixture
def temp_db(tmp_path: Path) -> Generator[Path, None, None]:
    """Temporary DB file + auto-cleanup."""
    db_path = tmp_path / "test-cli.db"
    yield db_path
    if db_path.exists():
        db_path.unlink()


@pytest.fixture
def populated_db(temp_db: Path) -> Path:
    """DB with the seeded SLA hotel."""
    with Gateway.connect(f"sqlite://{temp_db}") as gateway:
        gateway.get_contract("easybook").submit_transaction("InitLedger")
    return temp_db


def test_init_and_hotels_flat(temp_db: Path):
    result = runner.invoke(app, ["init", "--db", str(temp_db), "--contract", "hotel-rating"])
    assert result.exit_code == 0
    assert "initialised" in result.stdout

    result = runner.invoke(app, ["hotels", "--db", str(temp_db), "--contract", "hotel-rating"])
    assert result.exit_code == 0
    for name in ("Venice", "Milan", "Roma"):
        assert name in result.stdout
    assert result.stdout.index("hotel1") < result.stdout.index("hotel2") < result.stdout.index("hotel3")


def test_hotels_empty_db(temp_db: Path):
    result = runner.invoke(app, ["hotels", "--db", str(temp_db)])
    assert result.exit_code == 0
    assert "no hotels found" in result.stdout.lower()


def test_show_nested_hotel(populated_db: Path):
    result = runner.invoke(app, ["show", "1", "--db", str(populated_db)])
    assert result.exit_code == 0
    assert "Rex Hotel" in result.stdout
    assert "Standard" in result.stdout
    assert "totalUnfulfilledCommitments" in result.stdout


def test_show_missing_hotel(populated_db: Path):
    result = runner.invoke(app, ["show", "42", "--db", str(populated_db)])
    assert result.exit_code == 1
    assert "does not exist" in result.stdout


def test_exists(populated_db: Path):
    result = runner.invoke(app, ["exists", "1", "--db", str(populated_db)])
    assert result.exit_code == 0
    assert result.stdout.strip() == "true"

    result = runner.invoke(app, ["exists", "2", "--db", str(populated_db)])
    assert result.stdout.strip() == "false"


def test_submit_and_evaluate(temp_db: Path):
    result = runner.invoke(
        app,
        ["submit", "CreateHotel", "5", "Legend Saigon", "true", "8.1", "--db", str(temp_db), "-c", "hotel-rating"],
    )
    assert result.exit_code == 0, result.stdout

    result = runner.invoke(app, ["evaluate", "ReadHotel", "5", "--db", str(temp_db), "-c", "hotel-rating"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"id": "5", "name": "Legend Saigon", "isActive": True, "rating": 8.1}


def test_submit_rejects_bad_bool(temp_db: Path):
    result = runner.invoke(
        app,
        ["submit", "CreateHotel", "5", "Legend Saigon", "yes", "8.1", "--db", str(temp_db)],
    )
    assert result.exit_code == 1
    assert "failed" in result.stdout.lower()


def test_unknown_contract(temp_db: Path):
    result = runner.invoke(app, ["hotels", "--db", str(temp_db), "--contract", "fabcar"])
    assert result.exit_code == 2
    assert "unknown contract" in result.stdout.lower()


def test_functions_lists_public_names():
    result = runner.invoke(app, ["functions", "--contract", "hotel-rating"])
    assert result.exit_code == 0
    for name in ("InitLedger", "CreateHotel", "GetAllHotels", "HotelExists"):
        assert name in result.stdout


def test_demo_runs_sample_invocations(temp_db: Path):
    result = runner.invoke(app, ["demo", "--db", str(temp_db)])
    assert result.exit_code == 0, result.stdout
    assert "Legend Saigon" in result.stdout
    assert "Rex Hotel" in result.stdout
    assert "demo ends" in result.stdout


def test_env_db_path(temp_db: Path, monkeypatch):
    monkeypatch.setenv("EASYBOOK_DB_PATH", str(temp_db))
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0
    result = runner.invoke(app, ["exists", "1", "--db", str(temp_db)])
    assert result.stdout.strip() == "true"


def test_demo_can_run_twice(temp_db: Path):
    first = runner.invoke(app, ["demo", "--db", str(temp_db)])
    assert first.exit_code == 0, first.stdout

    second = runner.invoke(app, ["demo", "--db", str(temp_db)])
    assert second.exit_code == 0, second.stdout
    assert "already exists" in second.stdout
    assert "Legend Saigon" in second.stdout
