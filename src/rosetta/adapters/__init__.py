"""Host adapters that read declarations into class signatures.

This module provides the base classes and utilities for implementing
host-specific readers that feed the resolver.
"""

from rosetta.adapters.base import FileContext, HostAdapter, SymbolTable
from rosetta.adapters.java import JavaAdapter

__all__ = [
    "FileContext",
    "HostAdapter",
    "JavaAdapter",
    "SymbolTable",
]
