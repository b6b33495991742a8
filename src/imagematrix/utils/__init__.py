"""Utility helpers."""

from imagematrix.utils.decorators import timer

__all__ = ["timer"]
