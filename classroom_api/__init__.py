"""
Top‑level package for the Classroom Admin API.

This file makes ``classroom_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``classroom_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
