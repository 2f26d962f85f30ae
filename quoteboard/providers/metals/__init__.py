"""Precious-metal spot price providers."""
from __future__ import annotations

from .goldapi import GoldApiProvider

__all__ = ["GoldApiProvider"]
