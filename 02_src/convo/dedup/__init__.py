"""Deduplication module."""

from .filter import DedupFilter, IDedupFilter

__all__ = ["DedupFilter", "IDedupFilter"]
