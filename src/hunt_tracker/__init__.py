"""Game match tracker: file watchers, stats bundles and map notifications."""

__version__ = "0.1.0"

__all__ = ["__version__"]
