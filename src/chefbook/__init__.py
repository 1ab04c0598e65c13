"""Chefbook: chefs, a shared ingredient catalog and versioned dishes."""

__version__ = "0.1.0"
