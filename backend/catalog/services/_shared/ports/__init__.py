"""
Ports (hexagonal interfaces) the services depend on.

Concrete adapters live under :mod:`catalog.infra`.
"""

from __future__ import annotations

from .image_store import ImageStore
from .token_provider import TokenProvider

__all__ = ["ImageStore", "TokenProvider"]
