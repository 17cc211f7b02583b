"""
Two-tier memoization for generated field values.

Base values are keyed by (field name, schema shape) and expire lazily after
a TTL; unique values are keyed by (field name, schema shape, index) and live
as long as the cache instance.
"""
import json
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from crudgen.core.config import settings
from crudgen.core.monitoring import value_cache_lookups_total


def _schema_json(schema: Any) -> str:
    if hasattr(schema, "to_dict"):
        schema = schema.to_dict()
    return json.dumps(schema, default=str)


def cache_key(field_name: str, schema: Any) -> str:
    """Key shared by every operation using ``field_name`` with this schema shape."""
    return f"{field_name}_{_schema_json(schema)}"


def unique_cache_key(field_name: str, schema: Any, index: int) -> str:
    return f"{cache_key(field_name, schema)}_{index}"


class ValueCache:
    """Thread-safe base/unique value cache."""

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = settings.VALUE_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._base: Dict[str, Tuple[Any, float]] = {}
        self._unique: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get_base(self, key: str, default: Any = None) -> Any:
        """Return the base value unless it is missing or older than the TTL."""
        with self._lock:
            entry = self._base.get(key)
        if entry is not None:
            value, inserted_at = entry
            if self._clock() - inserted_at < self.ttl_seconds:
                value_cache_lookups_total.labels(tier="base", result="hit").inc()
                return value
            value_cache_lookups_total.labels(tier="base", result="expired").inc()
            return default
        value_cache_lookups_total.labels(tier="base", result="miss").inc()
        return default

    def set_base(self, key: str, value: Any) -> None:
        with self._lock:
            self._base[key] = (value, self._clock())

    def get_unique(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key in self._unique:
                value_cache_lookups_total.labels(tier="unique", result="hit").inc()
                return self._unique[key]
        value_cache_lookups_total.labels(tier="unique", result="miss").inc()
        return default

    def set_unique(self, key: str, value: Any) -> None:
        with self._lock:
            self._unique[key] = value

    def forget(self, field_name: str, schema: Any) -> int:
        """
        Drop the base value and every unique value of one field identity.

        Returns the number of entries removed.
        """
        base_key = cache_key(field_name, schema)
        prefix = f"{base_key}_"
        with self._lock:
            removed = 1 if self._base.pop(base_key, None) is not None else 0
            stale = [key for key in self._unique if key.startswith(prefix) and key[len(prefix):].isdigit()]
            for key in stale:
                del self._unique[key]
        return removed + len(stale)

    def clear(self) -> None:
        with self._lock:
            self._base.clear()
            self._unique.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._base) + len(self._unique)
