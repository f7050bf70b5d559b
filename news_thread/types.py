"""
Core data types for the news thread pipeline.

This module defines the data structures passed between stages:
- NewsItem / NewsBundle: Normalized extraction result consumed by the publisher
- RemoteArtifact: Handle to the uploaded source document
- ValidBundle / SchemaError / ParseError: Boundary result of parsing a model response
- ThreadState / ThreadReport: Publisher bookkeeping
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass
class NewsItem:
    """A single news story to be published as one post.

    Attributes:
        title: Headline (soft length limit, never truncated)
        short_description: One or two sentence summary
        link: Absolute URL of the story
        hashtags: 1-3 hashtags, each starting with "#"
    """
    title: str
    short_description: str = ""
    link: str = ""
    hashtags: list[str] = field(default_factory=list)


@dataclass
class NewsBundle:
    """Validated and normalized extraction result.

    Attributes:
        intro: Framing line for the first post
        outro: Call-to-action line for the last post
        items: Stories in publish order
    """
    intro: str
    outro: str
    items: list[NewsItem] = field(default_factory=list)


@dataclass
class RemoteArtifact:
    """Handle to a document uploaded to the extraction service.

    Owned by a single run and deleted when the run ends.
    """
    name: str
    uri: str
    mime_type: str
    display_name: str


@dataclass
class ValidBundle:
    """A response that parsed and matched the expected shape."""
    bundle: NewsBundle


@dataclass
class SchemaError:
    """Well-formed JSON with the wrong shape."""
    reason: str
    raw_text: str


@dataclass
class ParseError:
    """A response that could not be decoded as JSON."""
    reason: str
    raw_text: str


ExtractionResult = Union[ValidBundle, SchemaError, ParseError]


@dataclass
class ThreadState:
    """Mutable chain position held by the publisher during one publish call."""
    previous_post_id: str | None = None
    has_failure: bool = False


@dataclass
class ThreadReport:
    """Outcome of publishing one thread.

    Attributes:
        post_ids: IDs of successfully published posts, in order
        failures: Labels of posts that failed ("intro", "item 2", "outro")
        outro_posted: Whether the outro made it out
        aborted: Whether the abort policy stopped the item loop early
    """
    post_ids: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)
    outro_posted: bool = False
    aborted: bool = False

    @property
    def head_id(self) -> str | None:
        return self.post_ids[-1] if self.post_ids else None
