"""Common service, codec and integer-range contracts with reference implementations."""

__version__ = "0.1.0"
