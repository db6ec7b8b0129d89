"""
CLI interface module for thinkcyber-admin.

Provides a Typer-based command-line interface for running the gateway,
probing the backend and validating payload files.
"""

from __future__ import annotations

__all__: list[str] = []
