"""snaprel - release preparation for Cargo packages."""

__version__ = "0.1.0"
