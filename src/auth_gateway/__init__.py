"""Authentication gateway for the movies API."""

__version__ = "0.1.0"
