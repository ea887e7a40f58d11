from __future__ import annotations

import signal
import threading
import time
from pathlib import Path
from typing import List, Optional

import typer

from balance_trap.config import load_config
from balance_trap.core.decider import Decider, should_respond
from balance_trap.core.snapshot import encode_snapshot
from balance_trap.data.collector import BalanceCollector
from balance_trap.host.runner import TrapRunner
from balance_trap.host.sinks import build_sink
from balance_trap.utils.logging import setup_logging


app = typer.Typer(add_completion=False)

ConfigOption = typer.Option(None, "--config", help="Path to config.yaml")


def _build_runner(config_path: Optional[Path]) -> TrapRunner:
    cfg = load_config(config_path)
    collector = BalanceCollector.from_config(cfg)
    decider = Decider.from_config(cfg.runtime.trap)
    return TrapRunner(cfg, collector, decider, build_sink(cfg))


@app.command()
def run(
    log_level: Optional[str] = typer.Option(None),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Poll for new blocks and evaluate the balance at each one until stopped."""
    cfg = load_config(config)
    setup_logging(log_level or cfg.env.LOG_LEVEL)
    runner = _build_runner(config)

    stop_event = threading.Event()

    def handle_signal(signum, frame):  # noqa: ANN001, D401
        stop_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    runner.start()
    typer.echo(f"Watching {runner.collector.address}. Press Ctrl+C to stop.")
    try:
        while not stop_event.is_set():
            time.sleep(0.5)
    finally:
        runner.stop()


@app.command()
def replay(
    start_block: int = typer.Argument(..., help="First block to sample"),
    end_block: int = typer.Argument(..., help="Last block to sample (inclusive)"),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Evaluate a historical block range with the same rule used live."""
    cfg = load_config(config)
    setup_logging(cfg.env.LOG_LEVEL)
    runner = _build_runner(config)
    for block, verdict in runner.replay(start_block, end_block):
        typer.echo(f"{block}: respond={verdict.should_respond} message={verdict.message!r}")


@app.command()
def evaluate(
    balances: List[int] = typer.Argument(..., help="Balances in wei, newest first"),
    threshold: Optional[int] = typer.Option(None, help="Override the configured threshold (wei)"),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Evaluate balances given on the command line, newest first."""
    cfg = load_config(config)
    limit = cfg.runtime.trap.threshold_wei if threshold is None else threshold
    verdict = should_respond([encode_snapshot(b) for b in balances], limit)
    typer.echo(f"respond={verdict.should_respond} message={verdict.message!r}")


@app.command()
def collect(config: Optional[Path] = ConfigOption) -> None:
    """Print the current block and the snapshot for it."""
    cfg = load_config(config)
    collector = BalanceCollector.from_config(cfg)
    block = collector.latest_block()
    snapshot = collector.collect_at(block)
    typer.echo(f"{block}: 0x{snapshot.hex()}")


if __name__ == "__main__":
    app()
