"""Parser backends — source bytes in, IR trees out."""

from distiller.backends.base import BackendRegistry, ParserBackend, default_backends
from distiller.backends.python_backend import PythonBackend

__all__ = ["BackendRegistry", "ParserBackend", "PythonBackend", "default_backends"]
