"""Persistence for custom source configurations."""

from customsource.storage.persistence import SourceStorage

__all__ = ['SourceStorage']
