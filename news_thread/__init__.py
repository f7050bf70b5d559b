"""
News Thread - turns a news aggregator homepage into a social media thread.

The homepage is staged as a Gemini file, Gemini extracts the top stories as
schema-constrained JSON, and the result is posted to X/Twitter as a
reply chain (intro, one post per story, outro).

Main entry point is the CLI via `news-thread run` command.

Example:
    $ news-thread run --config config.yaml --dry-run
"""

__all__ = ["__version__", "AppConfig", "NewsBundle", "NewsItem", "load_config", "run_pipeline"]
__version__ = "0.1.0"

from .config import AppConfig, load_config
from .runner import run_pipeline
from .types import NewsBundle, NewsItem
