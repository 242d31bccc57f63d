"""CLI entry point for the trade journal analytics."""

from __future__ import annotations

import json

import click

from .core.enums import ExportFormat


@click.group()
def main() -> None:
    """Trade Journal Analytics."""


@main.command()
@click.argument("trades_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", default="configs/analytics.toml", help="Config file path")
@click.option(
    "--format", "fmt",
    type=click.Choice([f.value for f in ExportFormat]),
    default=ExportFormat.CSV.value,
    help="Report output format",
)
@click.option("--skip-invalid", is_flag=True, help="Drop invalid rows instead of failing")
def report(trades_file: str, config: str, fmt: str, skip_invalid: bool) -> None:
    """Print the analytics report for a JSON file of trade rows."""
    from .core.config import load_settings
    from .core.errors import TradeJournalError
    from .journal import AnalyticsExporter, TradeAnalytics, load_trades
    from .observability.logger import get_logger, new_run_id, setup_logging

    try:
        settings = load_settings(config_path=config)
    except TradeJournalError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(settings.observability)
    new_run_id()
    log = get_logger(__name__)

    with open(trades_file) as f:
        try:
            rows = json.load(f)
        except json.JSONDecodeError as exc:
            raise click.ClickException(f"{trades_file} is not valid JSON: {exc}") from exc
    if not isinstance(rows, list):
        raise click.ClickException(f"{trades_file} must contain a JSON list of trades")

    try:
        trades = load_trades(
            rows,
            skip_invalid=skip_invalid,
            emotion_config=settings.emotions,
        )
    except TradeJournalError as exc:
        raise click.ClickException(str(exc)) from exc

    result = TradeAnalytics(settings).report(trades)
    log.info(
        "report_built",
        trades=result.trade_count,
        win_rate=round(result.stats.win_rate, 2),
        profit_factor=result.stats.profit_factor,
    )

    exporter = AnalyticsExporter(decimal_places=settings.report.decimal_places)
    click.echo(exporter.render(result, fmt), nl=False)
