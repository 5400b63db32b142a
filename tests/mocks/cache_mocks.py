#!/usr/bin/env python3
"""
In-memory stand-in for ScoreCacheService.

Keeps the same get/set/delete/delete_pattern contract so services can be
tested without Redis, and records TTLs for assertions.
"""
import copy
import fnmatch
import json
from typing import Any, Dict, Optional


class FakeScoreCache:
    def __init__(self, available: bool = True):
        self.store: Dict[str, Any] = {}
        self.ttls: Dict[str, Optional[int]] = {}
        self.available = available

    @property
    def is_available(self) -> bool:
        return self.available

    def get(self, key: str) -> Optional[Any]:
        if not self.available or key not in self.store:
            return None
        return copy.deepcopy(self.store[key])

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        if not self.available:
            return False
        # Same JSON round trip as Redis
        self.store[key] = json.loads(json.dumps(value, default=str))
        self.ttls[key] = ttl_seconds
        return True

    def delete(self, key: str) -> bool:
        if not self.available:
            return False
        self.store.pop(key, None)
        self.ttls.pop(key, None)
        return True

    def delete_pattern(self, pattern: str) -> int:
        if not self.available:
            return 0
        keys = [k for k in self.store if fnmatch.fnmatchcase(k, pattern)]
        for key in keys:
            self.delete(key)
        return len(keys)

    def get_cache_stats(self) -> Dict[str, Any]:
        return {"available": self.available, "keys": len(self.store)}
