"""J-Grants subsidy finder: listing client, attachment store, and document conversion."""

__version__ = "0.1.0"
