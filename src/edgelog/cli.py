"""CLI entry point for the trading journal."""

from __future__ import annotations

from pathlib import Path

import click

from .core.config import Settings, load_settings
from .core.enums import ImportStatus
from .core.errors import JournalError
from .observability.logger import get_logger, setup_logging

log = get_logger(__name__)

_CONFIG_OPTION = click.option(
    "--config", "config_path", default="edgelog.toml", help="Config file path",
)


def _settings(config_path: str) -> Settings:
    try:
        settings = load_settings(config_path)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(settings.observability.log_level, settings.observability.log_format)
    return settings


def _parse_mapping(pairs: tuple[str, ...]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for pair in pairs:
        field_name, sep, column = pair.partition("=")
        if not sep or not field_name.strip():
            raise click.BadParameter(f"expected FIELD=COLUMN, got {pair!r}", param_hint="--map")
        mapping[field_name.strip()] = column.strip()
    return mapping


def _add_to_journal(store, owner_id: str, incoming) -> None:
    """Upsert *incoming* and recompute running equity over the whole journal."""
    from .journal.collection import replace_all

    combined = {t.id: t for t in store.list_trades(owner_id)}
    combined.update({t.id: t for t in incoming})
    store.save_collection(owner_id, replace_all(combined.values()))


@click.group()
def main() -> None:
    """EdgeLog trading journal."""


@main.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--map", "mapping", multiple=True, help="Manual column mapping FIELD=COLUMN")
@_CONFIG_OPTION
def import_(file: Path, mapping: tuple[str, ...], config_path: str) -> None:
    """Import a broker CSV export or a JSON journal snapshot."""
    from .ingest import ColumnMapping, import_mapped, import_text, load_snapshot
    from .storage import open_store

    settings = _settings(config_path)
    text = file.read_text(encoding="utf-8-sig")
    owner = settings.storage.owner_id

    try:
        if file.suffix.lower() == ".json":
            imported = load_snapshot(text).trades
        else:
            if mapping:
                result = import_mapped(text, ColumnMapping.from_dict(_parse_mapping(mapping)), settings)
            else:
                result = import_text(text, settings)
            if result.status == ImportStatus.UNDETECTED:
                click.echo("Could not detect the file format. Columns found:")
                for header in result.headers:
                    click.echo(f"  {header}")
                click.echo("Re-run with --map instrument=COL --map entry_price=COL --map entry_time=COL ...")
                raise SystemExit(2)
            result.raise_for_status()
            imported = result.trades

        _add_to_journal(open_store(settings), owner, imported)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    log.info("import_complete", file=str(file), trades=len(imported))
    click.echo(f"Imported {len(imported)} trades from {file.name}")


@main.command()
@click.option("--text", default="", help="Match instrument or setup")
@click.option("--setup", default="All", help="Only this setup")
@click.option("--side", default="All", type=click.Choice(["All", "Long", "Short"]))
@click.option("--outcome", default="All", type=click.Choice(["All", "Win", "Loss"]))
@_CONFIG_OPTION
def stats(text: str, setup: str, side: str, outcome: str, config_path: str) -> None:
    """Print performance statistics."""
    from .journal import TradeFilter, compute_statistics
    from .storage import open_store

    settings = _settings(config_path)
    try:
        trades = open_store(settings).list_trades(settings.storage.owner_id)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    selected = TradeFilter(text=text, setup=setup, side=side, outcome=outcome).apply(trades)
    result = compute_statistics(selected, settings.tags)
    if result is None:
        click.echo("No trades match.")
        return

    click.echo(f"Trades:         {result.trade_count}")
    click.echo(f"Total P&L:      {result.total_pnl:.2f}")
    click.echo(f"Win rate:       {result.win_rate:.1f}%")
    click.echo(f"Profit factor:  {result.profit_factor:.2f}")
    click.echo(f"Avg win/loss:   {result.avg_win:.2f} / {result.avg_loss:.2f}  (R {result.r_ratio:.2f})")
    click.echo(f"Expectancy:     {result.expectancy:.2f}")
    for metrics in result.setup_metrics:
        click.echo(
            f"  {metrics.setup:<16} n={metrics.count:<4} win={metrics.win_rate:.1f}% "
            f"pf={metrics.profit_factor:.2f} exp={metrics.expectancy:.2f}"
        )
    if result.best_combo is not None:
        click.echo(f"Best combo:     {result.best_combo.name} ({result.best_combo.expectancy:.2f})")
        click.echo(f"Worst combo:    {result.worst_combo.name} ({result.worst_combo.expectancy:.2f})")


@main.command()
@click.argument("trade_ids", nargs=-1, required=True)
@_CONFIG_OPTION
def merge(trade_ids: tuple[str, ...], config_path: str) -> None:
    """Merge two or more trades into one."""
    from .journal import merge_selected
    from .storage import open_store

    settings = _settings(config_path)
    owner = settings.storage.owner_id
    try:
        store = open_store(settings)
        result = merge_selected(
            store.list_trades(owner), trade_ids,
            separator=settings.ingest.merge_note_separator,
        )
        if not result.changed:
            click.echo("Select at least two trades to merge.")
            return
        store.save_collection(owner, result.trades, removed_ids=trade_ids)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Merged into {result.merged.id} (P&L {result.merged.realized_pnl})")


@main.command()
@click.argument("trade_id")
@_CONFIG_OPTION
def delete(trade_id: str, config_path: str) -> None:
    """Delete one trade and recompute running equity."""
    from .journal.collection import delete_trade
    from .storage import open_store

    settings = _settings(config_path)
    owner = settings.storage.owner_id
    try:
        store = open_store(settings)
        remaining = delete_trade(store.list_trades(owner), trade_id)
        store.save_collection(owner, remaining, removed_ids=[trade_id])
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Deleted {trade_id}")


@main.command("export-csv")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write to this file instead of stdout")
@_CONFIG_OPTION
def export_csv(output: Path | None, config_path: str) -> None:
    """Export the journal as CSV."""
    from .journal import TradeExporter
    from .storage import open_store

    settings = _settings(config_path)
    try:
        trades = open_store(settings).list_trades(settings.storage.owner_id)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    content = TradeExporter().to_csv(trades)
    if output is None:
        click.echo(content, nl=False)
    else:
        output.write_text(content, encoding="utf-8")
        click.echo(f"Wrote {len(trades)} trades to {output}")


@main.command("export-json")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), required=True)
@_CONFIG_OPTION
def export_json(output: Path, config_path: str) -> None:
    """Export a full JSON snapshot (trades and tag vocabularies)."""
    from .ingest import dump_snapshot
    from .storage import open_store

    settings = _settings(config_path)
    try:
        trades = open_store(settings).list_trades(settings.storage.owner_id)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    output.write_text(dump_snapshot(trades, settings.tags), encoding="utf-8")
    click.echo(f"Wrote snapshot with {len(trades)} trades to {output}")


@main.command()
@click.option("--count", default=45, type=int, help="Number of demo trades")
@click.option("--seed", default=None, type=int, help="Random seed")
@_CONFIG_OPTION
def demo(count: int, seed: int | None, config_path: str) -> None:
    """Fill the journal with demo trades."""
    from .journal.demo import generate_demo_trades
    from .storage import open_store

    settings = _settings(config_path)
    trades = generate_demo_trades(count=count, seed=seed)
    try:
        _add_to_journal(open_store(settings), settings.storage.owner_id, trades)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Loaded {len(trades)} demo trades")


if __name__ == "__main__":
    main()
