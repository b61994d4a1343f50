"""Historical call-center replay for wait-time training data."""

__version__ = "0.1.0"
