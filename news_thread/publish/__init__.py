"""Thread composition and publishing."""

from .posters import DryRunPoster, Poster, TwitterPoster, create_poster
from .styling import to_bold
from .thread import ThreadPublisher, compose_intro, compose_item, compose_outro

__all__ = [
    "DryRunPoster",
    "Poster",
    "ThreadPublisher",
    "TwitterPoster",
    "compose_intro",
    "compose_item",
    "compose_outro",
    "create_poster",
    "to_bold",
]
