"""Parsing, typed access, formatting and binary encoding of TNL documents, with a variable-length integer codec."""

__version__ = "0.1.0"