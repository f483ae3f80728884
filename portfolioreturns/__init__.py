"""Lists and date-aligned tables of periodic investment returns."""

__version__ = "0.1.0"
__all__ = ["returnlist", "table", "timeindex"]