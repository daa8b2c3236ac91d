"""Concurrency control: per-resource admission limiting."""

from app.infrastructure.concurrency.keyed_mutex import KeyedMutex

__all__ = ["KeyedMutex"]
