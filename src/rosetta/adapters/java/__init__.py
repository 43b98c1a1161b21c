"""Java host adapter submodule.

This module provides the Java adapter for reading Java source code
into resolved class signatures.
"""

from rosetta.adapters.java.adapter import JavaAdapter
from rosetta.adapters.java.mirrors import JavaMirrorBuilder
from rosetta.adapters.java.scanner import JavaScanner

__all__ = ["JavaAdapter", "JavaMirrorBuilder", "JavaScanner"]
