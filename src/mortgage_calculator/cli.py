"""Interactive CLI — click entry point + interactive event loop.

Session startup:
  1. Feed any --amount / --term / --rate / --type options through the
     normalisers exactly as if they had been typed.
  2. Enter the interactive loop.

Event loop:
  - Display the form with per-field error markers.
  - Let the user edit a field, pick the mortgage type, calculate, clear, or exit.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import FIELD_LABELS, MORTGAGE_TYPES, NUMERIC_FIELDS, TYPE_LABELS
from .logs import configure_logging
from .session import MortgageSession, View

console = Console()
err_console = Console(stderr=True, style="bold red")

logger = logging.getLogger(__name__)

_FIELD_UNITS = {"amount": "£", "term": "years", "rate": "%"}
_FIELD_FORMATS = {"amount": "£{}", "term": "{} years", "rate": "{}%"}
_ACTIONS = ("amount", "term", "rate", "type", "calculate", "clear", "exit")


# ──────────────────────────────────────────────────────────────────────────────
# Display
# ──────────────────────────────────────────────────────────────────────────────

def display_form(session: MortgageSession) -> None:
    t = Table(title="Mortgage Calculator", box=box.SIMPLE, show_header=True, padding=(0, 2))
    t.add_column("Field", style="cyan")
    t.add_column("Value", justify="right")
    t.add_column("", style="bold red")

    for name in NUMERIC_FIELDS:
        value = getattr(session.inputs, name)
        shown = _FIELD_FORMATS[name].format(value) if value else "[dim]—[/dim]"
        t.add_row(FIELD_LABELS[name], shown, _error_marker(session, name))

    mortgage_type = session.inputs.mortgage_type
    t.add_row(
        FIELD_LABELS["type"],
        TYPE_LABELS[mortgage_type] if mortgage_type else "[dim]—[/dim]",
        _error_marker(session, "type"),
    )
    console.print(t)


def _error_marker(session: MortgageSession, name: str) -> str:
    error = session.errors.get(name)
    return error.message if error is not None else ""


def display_result(session: MortgageSession) -> None:
    if session.view is View.EMPTY or session.result is None:
        console.print(Panel(
            "[bold]Results shown here[/bold]\n"
            "Complete the form and choose [cyan]calculate[/cyan] to see what "
            "your monthly repayments would be.",
            expand=False,
        ))
        return

    result = session.result
    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="cyan")
    t.add_column("Value", justify="right")
    t.add_row("Your monthly repayments", f"[bold yellow]{result.monthly_payment_display}[/bold yellow]")
    t.add_row("Total you'll repay over the term", result.total_repayment_display)

    console.print()
    console.print(Panel(
        f"[bold green]Your results[/bold green] — {TYPE_LABELS[result.mortgage_type]}, "
        f"{result.years} years at {result.annual_rate_percent}%",
        expand=False,
    ))
    console.print(t)


def display_errors(session: MortgageSession) -> None:
    for name, error in session.errors.items():
        err_console.print(f"  {FIELD_LABELS[name]}: {error.message}")


# ──────────────────────────────────────────────────────────────────────────────
# Input helpers
# ──────────────────────────────────────────────────────────────────────────────

def _prompt_field(session: MortgageSession, name: str) -> None:
    raw = console.input(f"[bold]{FIELD_LABELS[name]} ({_FIELD_UNITS[name]}):[/bold] ")
    normalized = session.set_field(name, raw)  # type: ignore[arg-type]
    if normalized != raw.strip():
        console.print(f"  [dim]Entered as[/dim] {normalized or '(empty)'}")


def _prompt_type(session: MortgageSession) -> None:
    raw = console.input(f"[bold]Mortgage type ({' / '.join(MORTGAGE_TYPES)}):[/bold] ").strip().lower()
    try:
        session.select_type(raw)
    except ValueError as exc:
        err_console.print(f"  {exc}")


# ──────────────────────────────────────────────────────────────────────────────
# Event loop
# ──────────────────────────────────────────────────────────────────────────────

def interactive_loop(session: MortgageSession) -> None:
    display_form(session)
    display_result(session)

    while True:
        console.print()
        console.print(
            "[bold]Actions:[/bold] "
            + " · ".join(f"[cyan]{action}[/cyan]" for action in _ACTIONS)
        )
        action = console.input("[bold]> [/bold]").strip().lower()

        if action in ("exit", "quit", "q"):
            console.print("Goodbye.")
            break

        elif action in NUMERIC_FIELDS:
            _prompt_field(session, action)
            display_form(session)

        elif action == "type":
            _prompt_type(session)
            display_form(session)

        elif action == "calculate":
            if session.calculate() is None:
                display_form(session)
                display_errors(session)
            else:
                display_result(session)

        elif action == "clear":
            session.clear()
            display_form(session)
            display_result(session)

        else:
            err_console.print(f"  Unknown action '{action}'.")


# ──────────────────────────────────────────────────────────────────────────────
# Click entry point
# ──────────────────────────────────────────────────────────────────────────────

@click.command()
@click.option("--amount", type=str, default=None, help="Mortgage amount in pounds (e.g. 300,000)")
@click.option("--term", type=str, default=None, help="Mortgage term in years")
@click.option("--rate", type=str, default=None, help="Annual interest rate in percent (e.g. 5.25)")
@click.option("--type", "mortgage_type", type=click.Choice(list(MORTGAGE_TYPES)), default=None,
              help="Repayment (capital and interest) or interest-only")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              default="WARNING", show_default=True)
def main(
    amount: Optional[str],
    term: Optional[str],
    rate: Optional[str],
    mortgage_type: Optional[str],
    log_level: str,
) -> None:
    """Interactive mortgage repayment calculator."""
    configure_logging(log_level)
    console.print(Panel("[bold blue]Mortgage Calculator[/bold blue]", expand=False))

    session = MortgageSession()

    for name, raw in (("amount", amount), ("term", term), ("rate", rate)):
        if raw is None:
            continue
        if not session.set_field(name, raw):  # type: ignore[arg-type]
            err_console.print(f"Invalid value for --{name}: '{raw}'")
            sys.exit(1)

    if mortgage_type is not None:
        session.select_type(mortgage_type)

    logger.info("Session started with %s", session.inputs)

    try:
        interactive_loop(session)
    except (KeyboardInterrupt, EOFError):
        console.print("\nSession ended.")
