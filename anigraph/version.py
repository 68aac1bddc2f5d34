"""Package version, kept apart so settings can read it without import cycles."""

__version__ = "0.1.0"
