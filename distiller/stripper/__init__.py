"""Structural stripping — policy-driven reduction of IR trees."""

from distiller.stripper.policy import StripPolicy, load_policy
from distiller.stripper.stripper import strip

__all__ = ["StripPolicy", "load_policy", "strip"]
