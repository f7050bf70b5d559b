"""
Command-line interface for the news thread bot.

Uses Typer to provide a CLI with options for the main configuration
settings. Supports loading .env files for API keys and Twitter credentials.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import httpx
import typer
from rich.console import Console

from .config import AppConfig, load_config, validate_config
from .errors import PipelineError
from .llm.providers.factory import create_client
from .logging_utils import setup_logging
from .runner import run_pipeline
from .stage.artifacts import purge_remote_files

app = typer.Typer(add_completion=False)
console = Console(stderr=True)


def _load(config: Path | None, log_level: str | None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    return cfg


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log posts instead of publishing them."),
    policy: str | None = typer.Option(
        None, "--policy", help="Failure policy for the thread: continue or abort."
    ),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Number of news items to post."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log file format: jsonl or plain."
    ),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file."),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        envvar="GEMINI_API_KEY",
        help="Override Gemini API key (or set GEMINI_API_KEY / .env).",
    ),
):
    """Fetch the source page, extract top news and post them as a thread.

    Args:
        config: Optional path to YAML config file
        dry_run: Log posts instead of publishing them
        policy: Failure policy override (continue, abort)
        limit: Number of news items to keep
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log file format (jsonl, plain)
        log_file: Optional log file path
        api_key: Override Gemini API key
    """
    cfg = _load(config, log_level)

    # Override with CLI options
    if api_key:
        cfg.provider.api_key = api_key
    if policy:
        cfg.publish.failure_policy = policy
    if limit is not None:
        cfg.extract.limit = limit
    if log_format:
        cfg.logging.format = log_format
    if log_file is not None:
        cfg.logging.file = str(log_file)

    logger = setup_logging(cfg.logging)

    try:
        validate_config(cfg, dry_run=dry_run)
        report = run_pipeline(cfg, dry_run=dry_run)
    except PipelineError as exc:
        logger.debug("Run failed", exc_info=exc)
        console.print(f"[red]Run failed:[/red] {exc}")
        raise typer.Exit(code=1)

    if report is not None and report.failures:
        console.print(f"[yellow]Thread posted with failures:[/yellow] {', '.join(report.failures)}")


@app.command("purge-files")
def purge_files(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Delete every file stored in the Gemini File API for this key."""
    cfg = _load(config, log_level)
    setup_logging(cfg.logging)
    try:
        client = create_client(cfg.provider)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    try:
        deleted, failed = purge_remote_files(client)
    except httpx.HTTPError as exc:
        console.print(f"[red]Could not list remote files:[/red] {exc}")
        raise typer.Exit(code=1)
    console.print(f"Deleted {deleted} file(s), {failed} failure(s).")
    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
