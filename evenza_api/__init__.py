"""
Top‑level package for the Evenza API.

This file makes ``evenza_api`` a Python package so that modules within
``app`` can be imported using fully qualified names like
``evenza_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
