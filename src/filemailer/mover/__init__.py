"""Mover module for relocating sent files."""

from .relocator import RelocateError, RelocateResult, Relocator

__all__ = [
    "Relocator",
    "RelocateResult",
    "RelocateError",
]
