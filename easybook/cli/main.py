# easybook/cli/main.py
"""
CLI for seeding, querying and updating hotel rating / SLA records in the local world state.
"""

import json
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from easybook.chaincode import Chaincode, Gateway, TransactionError
from easybook.contract import CONTRACTS
from easybook.core.errors import StorageError
from easybook.logging_config import setup_logging

app = typer.Typer(
    name="easybook",
    help="Manage hotel rating and SLA records on the easybook ledger",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

DEFAULT_CONTRACT = "easybook"


def get_db_path(db_flag: Optional[Path] = None) -> Path:
    """Resolve DB path in this order:
    1. --db flag
    2. EASYBOOK_DB_PATH environment variable
    3. Default: ~/.easybook/state.db
    """
    if db_flag:
        path = db_flag.resolve()
    else:
        env_path = os.environ.get("EASYBOOK_DB_PATH")
        if env_path:
            path = Path(env_path).resolve()
        else:
            path = Path.home() / ".easybook" / "state.db"

    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def get_contract_name(contract_flag: Optional[str] = None) -> str:
    name = contract_flag or os.environ.get("EASYBOOK_CONTRACT") or DEFAULT_CONTRACT
    if name not in CONTRACTS:
        console.print(f"[red]Unknown contract '{name}'. Choose one of: {', '.join(sorted(CONTRACTS))}[/]")
        raise typer.Exit(2)
    return name


def open_gateway(db: Optional[Path]) -> Gateway:
    db_path = get_db_path(db)
    return Gateway.connect(f"sqlite://{db_path}")


def print_payload(payload: bytes) -> None:
    if not payload:
        console.print("[green]OK[/]")
        return
    text = payload.decode("utf-8")
    try:
        console.print_json(text)
    except json.JSONDecodeError:
        console.print(text)


def run(db: Optional[Path], contract: Optional[str], function: str, args: List[str], submit: bool) -> bytes:
    name = get_contract_name(contract)
    try:
        with open_gateway(db) as gateway:
            client = gateway.get_contract(name)
            if submit:
                return client.submit_transaction(function, *args)
            return client.evaluate_transaction(function, *args)
    except TransactionError as e:
        console.print(f"[red]{function} failed: {e.message}[/]")
        raise typer.Exit(1)
    except StorageError as e:
        console.print(f"[red]Failed to open database: {str(e)}[/]")
        raise typer.Exit(1)


DbOption = typer.Option(None, "--db", help="Path to SQLite database (overrides EASYBOOK_DB_PATH env var)")
ContractOption = typer.Option(None, "--contract", "-c", help="Contract name: easybook (SLA) or hotel-rating")


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="EASYBOOK_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Manage hotel rating and SLA records."""
    setup_logging(log_level)


@app.command()
def init(
    db: Optional[Path] = DbOption,
    contract: Optional[str] = ContractOption,
):
    """Seed the ledger with the built-in hotels (overwrites records with the same ids)."""
    run(db, contract, "InitLedger", [], submit=True)
    console.print("[green]Ledger initialised[/]")


@app.command()
def hotels(
    db: Optional[Path] = DbOption,
    contract: Optional[str] = ContractOption,
):
    """List every hotel in key order."""
    payload = run(db, contract, "GetAllHotels", [], submit=False)
    records = json.loads(payload.decode("utf-8"))

    if not records:
        console.print("[yellow]No hotels found in world state.[/]")
        console.print("  Run 'easybook init' to seed the ledger.")
        return

    table = Table(title="Hotels")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Active")
    table.add_column("Rating")
    table.add_column("Service Levels")

    for record in records:
        levels = record.get("serviceLevels")
        table.add_row(
            record["id"],
            record["name"],
            "yes" if record["isActive"] else "no",
            str(record["rating"]),
            "—" if levels is None else str(len(levels)),
        )

    console.print(table)


@app.command()
def show(
    hotel_id: str = typer.Argument(..., help="Hotel ID to display"),
    db: Optional[Path] = DbOption,
    contract: Optional[str] = ContractOption,
):
    """Show one hotel record."""
    print_payload(run(db, contract, "ReadHotel", [hotel_id], submit=False))


@app.command()
def exists(
    hotel_id: str = typer.Argument(..., help="Hotel ID to look up"),
    db: Optional[Path] = DbOption,
    contract: Optional[str] = ContractOption,
):
    """Print 'true' if a hotel with the given id exists."""
    console.print(run(db, contract, "HotelExists", [hotel_id], submit=False).decode("utf-8"))


@app.command()
def submit(
    function: str = typer.Argument(..., help="Contract function, e.g. CreateHotel"),
    args: Optional[List[str]] = typer.Argument(None, help="Text arguments"),
    db: Optional[Path] = DbOption,
    contract: Optional[str] = ContractOption,
):
    """Submit a transaction; its writes are committed."""
    print_payload(run(db, contract, function, args or [], submit=True))


@app.command()
def evaluate(
    function: str = typer.Argument(..., help="Contract function, e.g. ReadHotel"),
    args: Optional[List[str]] = typer.Argument(None, help="Text arguments"),
    db: Optional[Path] = DbOption,
    contract: Optional[str] = ContractOption,
):
    """Evaluate a transaction; nothing is committed."""
    print_payload(run(db, contract, function, args or [], submit=False))


@app.command()
def functions(
    contract: Optional[str] = ContractOption,
):
    """List the functions a contract exposes."""
    name = get_contract_name(contract)
    chaincode = Chaincode(CONTRACTS[name]())

    table = Table(title=f"Contract '{name}'")
    table.add_column("Function")
    table.add_column("Kind")
    for function, is_submit in chaincode.functions().items():
        table.add_row(function, "submit" if is_submit else "evaluate")
    console.print(table)


@app.command()
def demo(
    db: Optional[Path] = DbOption,
    contract: Optional[str] = ContractOption,
):
    """Run the sample invocation sequence against the ledger."""
    console.print("[bold]============ easybook demo starts ============[/]")

    console.print("--> Submit Transaction: InitLedger")
    run(db, contract, "InitLedger", [], submit=True)

    console.print("--> Evaluate Transaction: GetAllHotels")
    print_payload(run(db, contract, "GetAllHotels", [], submit=False))

    # InitLedger does not touch hotel 5, so a previous run may have created it
    if run(db, contract, "HotelExists", ["5"], submit=False) == b"true":
        console.print("--> Skipping CreateHotel: hotel 5 already exists")
    else:
        console.print("--> Submit Transaction: CreateHotel, creates new hotel with id, name, isActive, and rating arguments")
        run(db, contract, "CreateHotel", ["5", "Legend Saigon", "true", "8.1"], submit=True)

    console.print("--> Evaluate Transaction: ReadHotel, returns the hotel with the given id")
    print_payload(run(db, contract, "ReadHotel", ["5"], submit=False))

    console.print("--> Evaluate Transaction: HotelExists, returns 'true' if a hotel with the given id exists")
    console.print(run(db, contract, "HotelExists", ["5"], submit=False).decode("utf-8"))

    console.print("[bold]============ easybook demo ends ============[/]")


if __name__ == "__main__":
    app()
