"""Restaurant discovery dialog and reservation workflow client."""

__version__ = "0.1.0"
