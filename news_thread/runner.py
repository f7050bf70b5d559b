"""
Main pipeline orchestration for the news thread bot.

This module coordinates one run, strictly in sequence:
1. Fetch the source page
2. Stage it as a remote artifact
3. Extract a normalized NewsBundle
4. Publish the bundle as a thread
5. Release the remote artifact (on every exit path)

Stage-level errors abort the run after cleanup. Per-post failures only
degrade the thread.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from .config import AppConfig
from .errors import ConfigError, PipelineError
from .extract.extractor import NewsExtractor
from .fetch.fetcher import fetch_document
from .llm.providers.base import GenerativeClient
from .llm.providers.factory import create_client
from .logging_utils import log_event
from .publish.posters import Poster, create_poster
from .publish.thread import ThreadPublisher
from .stage.artifacts import ArtifactStager, build_display_name, staged_artifact
from .types import ThreadReport

logger = logging.getLogger(__name__)

_BANNER = "-" * 36


def run_pipeline(
    cfg: AppConfig,
    client: GenerativeClient | None = None,
    poster: Poster | None = None,
    dry_run: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> ThreadReport | None:
    """Run the complete fetch → extract → publish pipeline once.

    Args:
        cfg: Application configuration
        client: Generative service client (built from config if None)
        poster: Publishing backend (built from config if None)
        dry_run: Log posts instead of publishing them when no poster is given
        sleep: Pacing function used between posts

    Returns:
        The thread report, or None when nothing was extracted

    Raises:
        PipelineError: On any stage-level failure, after cleanup has run
    """
    log_event(logger, "Pipeline start", event="pipeline_start", source=cfg.source.url, dry_run=dry_run)
    try:
        if client is None:
            try:
                client = create_client(cfg.provider)
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc
        if poster is None:
            poster = create_poster(cfg, dry_run=dry_run)

        html = fetch_document(cfg.source.url, cfg.source)
        stager = ArtifactStager(client, cfg.stage)
        display_name = build_display_name(cfg.source.display_name_prefix)

        with staged_artifact(stager, html, display_name) as artifact:
            extractor = NewsExtractor(client, cfg.extract, cfg.source.url)
            bundle = extractor.extract(artifact)

            if not bundle.items:
                log_event(
                    logger,
                    "No news found or extracted. Nothing posted",
                    event="pipeline_empty",
                )
                return None

            report = ThreadPublisher(poster, cfg.publish, sleep=sleep).publish(bundle)
    except PipelineError as exc:
        _log_failure_banner(exc)
        raise

    log_event(
        logger,
        "Successfully fetched news and posted the thread",
        event="pipeline_done",
        posted=len(report.post_ids),
        failures=report.failures,
        outro_posted=report.outro_posted,
    )
    return report


def _log_failure_banner(exc: Exception) -> None:
    logger.error(_BANNER)
    logger.error("An error occurred during execution:")
    logger.error("%s: %s", type(exc).__name__, exc)
    logger.error(_BANNER)
