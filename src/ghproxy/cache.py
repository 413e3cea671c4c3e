import json
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from ghproxy.config import DEFAULT_CACHE_SECONDS

Clock = Callable[[], float]


class Cache(ABC):
    """Key-value store whose entries expire a fixed duration after being set."""

    def __init__(
        self, duration_seconds: float = DEFAULT_CACHE_SECONDS, clock: Clock = time.time
    ):
        self.duration = duration_seconds
        self.clock = clock

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return the cached value, or default if missing or expired."""
        entry = self._read(key)
        if entry is None or not self._fresh(entry):
            return default
        return entry["value"]

    def set(self, key: str, value: Any) -> bool:
        """Store value under key. Returns False if the value could not be stored."""
        try:
            self._write(key, {"value": value, "timestamp": self.clock()})
        except (OSError, TypeError, ValueError) as exc:
            logging.warning("Failed to cache data for %s: %s", key, exc)
            return False
        return True

    def __contains__(self, key: str) -> bool:
        entry = self._read(key)
        return entry is not None and self._fresh(entry)

    def _fresh(self, entry: Dict[str, Any]) -> bool:
        return self.clock() - entry["timestamp"] < self.duration

    @abstractmethod
    def _read(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the raw entry for key, if any."""

    @abstractmethod
    def _write(self, key: str, entry: Dict[str, Any]) -> None:
        """Store the raw entry for key."""


class NullCache(Cache):
    """Cache implementation that discards everything."""

    def _read(self, key: str) -> Optional[Dict[str, Any]]:
        return None

    def _write(self, key: str, entry: Dict[str, Any]) -> None:
        return None


class MemoryCache(Cache):
    """In-memory cache that never persists to disk."""

    def __init__(self, duration_seconds: float = DEFAULT_CACHE_SECONDS, clock: Clock = time.time):
        super().__init__(duration_seconds, clock)
        self._data: Dict[str, Dict[str, Any]] = {}

    def _read(self, key: str) -> Optional[Dict[str, Any]]:
        return self._data.get(key)

    def _write(self, key: str, entry: Dict[str, Any]) -> None:
        self._data[key] = entry


class FileCache(Cache):
    """JSON file backed cache, written through on every set."""

    def __init__(
        self,
        cache_file: Union[str, Path],
        duration_seconds: float = DEFAULT_CACHE_SECONDS,
        clock: Clock = time.time,
    ):
        super().__init__(duration_seconds, clock)
        self.cache_path = Path(cache_file).expanduser()
        logging.info("Using cache file %s", self.cache_path)
        self._data: Dict[str, Dict[str, Any]] = self._load()

    def _read(self, key: str) -> Optional[Dict[str, Any]]:
        return self._data.get(key)

    def _write(self, key: str, entry: Dict[str, Any]) -> None:
        # Serialize before touching state so a bad value leaves the cache intact.
        data = dict(self._data)
        data[key] = entry
        payload = json.dumps(data, indent=4)
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.cache_path.write_text(payload)
        self._data = data

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.cache_path.exists():
            return {}
        try:
            with open(self.cache_path, "r") as file:
                data = json.load(file)
        except (OSError, json.JSONDecodeError):
            logging.warning("Ignoring unreadable cache file %s", self.cache_path)
            return {}

        if not isinstance(data, dict):
            logging.warning("Ignoring malformed cache file %s", self.cache_path)
            return {}
        return {key: entry for key, entry in data.items() if _valid_entry(entry)}


def _valid_entry(entry: Any) -> bool:
    return (
        isinstance(entry, dict)
        and "value" in entry
        and isinstance(entry.get("timestamp"), (int, float))
        and not isinstance(entry.get("timestamp"), bool)
    )


def create_cache(
    cache_target: Optional[Union[str, Path]],
    duration_seconds: float = DEFAULT_CACHE_SECONDS,
) -> Cache:
    """Factory for cache instances.

    None, an empty string or "memory" give an in-memory cache, "none" disables
    caching and anything else is treated as a file path.
    """
    if cache_target is None:
        return MemoryCache(duration_seconds)

    cache_name = str(cache_target).strip().lower()
    if cache_name in {"", "memory"}:
        return MemoryCache(duration_seconds)
    if cache_name in {"none", "null", "off"}:
        return NullCache(duration_seconds)

    return FileCache(cache_target, duration_seconds)
