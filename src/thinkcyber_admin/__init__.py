"""
thinkcyber-admin - Admin gateway for the ThinkCyber learning platform.

Proxies content-management operations (categories, subcategories, topics,
terms, privacy policies, homepage content) to the platform backend and
normalizes every request and response on the way through.
"""

from __future__ import annotations

__version__ = "0.4.0"
__author__ = "thinkcyber"
__email__ = "noreply@thinkcyber.dev"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
