"""VLSM subnet allocation calculator."""

__version__ = "1.0.0"
