"""
Local state storage
"""
from .digest_store import DigestCacheStore

__all__ = ["DigestCacheStore"]
