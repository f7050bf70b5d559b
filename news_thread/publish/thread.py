"""
Thread composition and publishing.

A NewsBundle becomes a reply chain: intro, one post per item, outro. Each
post replies to the last post that succeeded. A failed post never aborts
the run; depending on the failure policy the remaining items are either
still attempted ("continue") or skipped ("abort"). Once any post has
failed the outro is not published.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from ..config import PublishConfig
from ..errors import PublishError
from ..logging_utils import log_event
from ..types import NewsBundle, NewsItem, ThreadReport, ThreadState
from .posters import Poster
from .styling import to_bold

logger = logging.getLogger(__name__)


def compose_intro(intro: str, cfg: PublishConfig) -> str:
    hashtags = " ".join(cfg.intro_hashtags)
    return f"{intro}\n\n{hashtags}" if hashtags else intro


def compose_item(item: NewsItem, index: int, total: int, cfg: PublishConfig) -> str:
    """Build the body of the post for the item at 0-based `index`."""
    blocks = [to_bold(item.title), item.short_description]
    if cfg.include_link and item.link:
        blocks.append(item.link)
    blocks.append(" ".join(item.hashtags))
    text = "\n\n".join(block for block in blocks if block)
    if cfg.numbering and total > 1:
        text += f"\n\n({index + 1}/{total})"
    return text


def compose_outro(outro: str, cfg: PublishConfig) -> str:
    if cfg.outro_attribution:
        return f"{outro}\n\n{cfg.outro_attribution}"
    return outro


class ThreadPublisher:
    """Publishes a NewsBundle as a reply-chained thread."""

    def __init__(
        self,
        poster: Poster,
        cfg: PublishConfig,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.poster = poster
        self.cfg = cfg
        self.sleep = sleep

    def publish(self, bundle: NewsBundle) -> ThreadReport:
        report = ThreadReport()
        items = bundle.items
        if not items:
            log_event(logger, "No news items to post", event="publish_skipped")
            return report

        total = len(items)
        log_event(
            logger,
            f"Posting {total} news items as a thread",
            event="publish_start",
            items=total,
            policy=self.cfg.failure_policy,
        )
        state = ThreadState()

        self._attempt("intro", compose_intro(bundle.intro, self.cfg), state, report)

        for index, item in enumerate(items):
            if state.has_failure and self.cfg.failure_policy == "abort":
                report.aborted = True
                log_event(
                    logger,
                    "Aborting further posts due to error",
                    level=logging.ERROR,
                    event="publish_aborted",
                    remaining=total - index,
                )
                break
            label = f"item {index + 1}"
            log_event(logger, f"Posting {label}: {item.title}", event="post_item", index=index)
            self._attempt(label, compose_item(item, index, total, self.cfg), state, report)

        if state.has_failure:
            log_event(
                logger,
                "Skipping outro because the thread is incomplete",
                level=logging.WARNING,
                event="outro_skipped",
                failures=report.failures,
            )
        else:
            report.outro_posted = self._attempt(
                "outro", compose_outro(bundle.outro, self.cfg), state, report
            )

        log_event(
            logger,
            "Finished posting thread",
            event="publish_done",
            posted=len(report.post_ids),
            failures=report.failures,
            head_id=report.head_id,
        )
        return report

    def _attempt(self, label: str, text: str, state: ThreadState, report: ThreadReport) -> bool:
        if report.post_ids or report.failures:
            self.sleep(self.cfg.post_delay_seconds)

        if len(text) > self.cfg.max_post_chars:
            log_event(
                logger,
                f"Post {label} might be too long ({len(text)} chars), attempting to post anyway",
                level=logging.WARNING,
                event="post_too_long",
                label=label,
                chars=len(text),
            )

        try:
            post_id = self.poster.post(text, in_reply_to=state.previous_post_id)
        except PublishError as exc:
            state.has_failure = True
            report.failures.append(label)
            log_event(
                logger,
                f"Error posting {label}: {exc}",
                level=logging.ERROR,
                event="post_failed",
                label=label,
                details=exc.details,
            )
            return False

        log_event(
            logger,
            f"Post {label} published successfully! ID: {post_id}",
            event="post_ok",
            label=label,
            post_id=post_id,
            in_reply_to=state.previous_post_id,
        )
        state.previous_post_id = post_id
        report.post_ids.append(post_id)
        return True
