"""
Configuration management module for thinkcyber-admin.

Handles application settings, environment variables and logging setup.
"""

from __future__ import annotations

__all__: list[str] = []
