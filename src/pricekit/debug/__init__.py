"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: debug/__init__.py.
"""

from .app import DebugAppError, create_debug_app

__all__ = ["DebugAppError", "create_debug_app"]
