"""Utility functions."""

from .timestamps import coerce_period, ensure_aware, to_api_time, to_epoch_seconds

__all__ = ["coerce_period", "ensure_aware", "to_api_time", "to_epoch_seconds"]
