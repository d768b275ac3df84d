"""Ethos: ESG reporting analytics."""

__version__ = "1.0.0"
