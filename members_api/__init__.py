"""
Top-level package for the Members API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``members_api.app.main:app``.
"""

__version__ = "1.0.0"

__all__ = []
