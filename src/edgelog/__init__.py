"""EdgeLog — personal trading journal engine."""

__version__ = "0.1.0"
