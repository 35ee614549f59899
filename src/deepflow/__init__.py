"""DeepFlow - focus-session timer with session analytics."""

__version__ = "0.1.0"
