"""Distiller — compact, structure-preserving views of source code for LLMs."""

__version__ = "0.3.0"
