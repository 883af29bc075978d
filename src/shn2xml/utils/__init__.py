"""Utility helpers for shn2xml."""

from .stats import ConversionStats

__all__ = ["ConversionStats"]
