"""easykill - pick processes from an interactive list and terminate them."""

__version__ = "0.1.0"
