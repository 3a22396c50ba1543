"""Airport and lounge records: crawler plus file-backed query API."""

__version__ = "0.1.0"
