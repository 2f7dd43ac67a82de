"""Tourist guide address caching and change-detection engine."""

__version__ = "0.1.0"
