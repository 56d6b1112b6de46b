"""Readers for Nitro model, animation and pattern files, with skeleton reconstruction helpers."""

__version__ = "0.1.0"