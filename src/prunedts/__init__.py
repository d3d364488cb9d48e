"""prunedts - public declaration trimming and API report generation."""

__version__ = "0.1.0"
