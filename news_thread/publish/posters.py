"""Micro-blogging backends used by the thread publisher."""

from __future__ import annotations

from abc import ABC, abstractmethod
import itertools
import logging
from typing import Any

import requests
import tweepy

from ..config import AppConfig, get_twitter_credentials
from ..errors import ConfigError, PublishError
from ..logging_utils import log_event

logger = logging.getLogger(__name__)


class Poster(ABC):
    """Publishes one post and returns its ID."""

    @abstractmethod
    def post(self, text: str, in_reply_to: str | None = None) -> str:
        """Publish `text`, optionally as a reply.

        Raises:
            PublishError: If the platform rejects or fails the post
        """
        raise NotImplementedError


class TwitterPoster(Poster):
    """X/Twitter v2 poster using OAuth 1.0a user context."""

    def __init__(self, client: tweepy.Client):
        self.client = client

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "TwitterPoster":
        creds = get_twitter_credentials(cfg.twitter)
        missing = creds.missing()
        if missing:
            raise ConfigError(f"Missing Twitter credentials: {', '.join(missing)}")
        client = tweepy.Client(
            consumer_key=creds.api_key,
            consumer_secret=creds.api_secret,
            access_token=creds.access_token,
            access_token_secret=creds.access_token_secret,
        )
        return cls(client)

    def post(self, text: str, in_reply_to: str | None = None) -> str:
        try:
            response = self.client.create_tweet(text=text, in_reply_to_tweet_id=in_reply_to)
        except tweepy.TweepyException as exc:
            raise PublishError(str(exc), details=_error_details(exc)) from exc
        except requests.exceptions.RequestException as exc:
            raise PublishError(f"Transport error: {exc}") from exc
        data = getattr(response, "data", None) or {}
        post_id = data.get("id")
        if not post_id:
            raise PublishError("Post response did not include an ID", details=data)
        return str(post_id)


class DryRunPoster(Poster):
    """Logs posts instead of publishing them and hands out synthetic IDs."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.posts: list[tuple[str, str | None]] = []

    def post(self, text: str, in_reply_to: str | None = None) -> str:
        post_id = f"dry-run-{next(self._ids)}"
        self.posts.append((text, in_reply_to))
        log_event(
            logger,
            f"[dry-run] {text}",
            event="dry_run_post",
            post_id=post_id,
            in_reply_to=in_reply_to,
        )
        return post_id


def create_poster(cfg: AppConfig, dry_run: bool = False) -> Poster:
    if dry_run:
        return DryRunPoster()
    return TwitterPoster.from_config(cfg)


def _error_details(exc: tweepy.TweepyException) -> dict[str, Any] | None:
    if not isinstance(exc, tweepy.HTTPException):
        return None
    return {
        "status_code": exc.response.status_code if exc.response is not None else None,
        "api_codes": exc.api_codes,
        "api_messages": exc.api_messages,
        "api_errors": exc.api_errors,
    }
