"""CLI bootstrap for budget-core."""

import json
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

import typer

from budget_core.core.logging_setup import configure_logging
from budget_core.core.settings import get_settings
from budget_core.domain.conversion import ConversionResolver
from budget_core.domain.currency import BASE_CURRENCY, Currency
from budget_core.domain.exchange_rates import (
    ExchangeRate,
    RateType,
    build_rate_table,
    select_rate_snapshot,
)
from budget_core.domain.money import MoneyAmount, parse_money_input
from budget_core.domain.periods import Cadence, period_display_text, period_window

app = typer.Typer(help="CLI for the budget monetary core.")
RATES_FILE_OPTION = typer.Option(..., exists=True, dir_okay=False)


def _load_rates(path: Path) -> list[ExchangeRate]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    return [
        ExchangeRate(
            from_currency=Currency(item["from_currency"]),
            to_currency=Currency(item["to_currency"]),
            rate=Decimal(str(item["rate"])),
            effective_date=datetime.fromisoformat(item["effective_date"]).date(),
            rate_type=RateType(item["rate_type"]) if item.get("rate_type") else None,
            owner_id=item.get("owner_id"),
            source=item.get("source"),
        )
        for item in payload
    ]


@app.callback()
def main_callback() -> None:
    configure_logging(get_settings().log_level)


@app.command("healthcheck")
def healthcheck() -> None:
    """Verify that the CLI entrypoint is available."""
    typer.echo("budget-core is ready")


@app.command("convert")
def convert(
    amount: str,
    from_currency: Currency,
    to_currency: Currency,
    rates: Path = RATES_FILE_OPTION,
    owner_id: str | None = None,
) -> None:
    """Convert an amount using rates from a JSON file."""
    rate_list = select_rate_snapshot(_load_rates(rates), owner_id)
    resolver = ConversionResolver(
        build_rate_table(rate_list), local_currency=BASE_CURRENCY
    )
    money = MoneyAmount(parse_money_input(amount, from_currency), from_currency)
    outcome = resolver.convert(money, to_currency)

    typer.echo(f"Resultado: {outcome.amount.format()}")
    typer.echo(f"Metodo: {outcome.method.value}")
    if outcome.chain:
        typer.echo("Cadena: " + " -> ".join(item.value for item in outcome.chain))
    if not outcome.succeeded:
        typer.echo(
            f"Advertencia: no hay tipo de cambio {from_currency.value} -> "
            f"{to_currency.value}"
        )
        raise typer.Exit(code=2)


@app.command("period")
def period(
    cadence: Cadence,
    at: datetime | None = None,
    locale: str | None = None,
) -> None:
    """Print the billing window that contains a moment."""
    window = period_window(cadence, at or datetime.now(tz=UTC))
    typer.echo(f"Inicio: {window.start.isoformat()}")
    typer.echo(f"Fin: {window.end.isoformat()}")
    typer.echo(
        period_display_text(
            window.start, cadence, locale or get_settings().default_locale
        )
    )


def main() -> None:
    """Run the budget-core CLI application."""
    app()


if __name__ == "__main__":
    main()
