"""Command-line client for composing Bluesky posts, threads and quotes."""

__version__ = "0.1.0"
