"""
StormWatch Weather Monitoring

This package aggregates weather and hurricane data from several providers,
synthesizes one ranked condition per location and decides when to notify.
"""

__version__ = "0.1.0"
__description__ = "Multi-source weather aggregation and storm notification engine"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "StormWatchApp":
        from .main import StormWatchApp
        return StormWatchApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "StormWatchApp",
]
