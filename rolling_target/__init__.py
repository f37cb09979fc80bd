"""Rolling target tracking and adaptive daily target suggestions."""

__version__ = "1.0.0"
