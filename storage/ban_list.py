"""
# storage/ban_list.py

Module Contract
- Purpose: Persistent set of assistant names barred from (re)creation. Names are stored lower-cased and compared case-insensitively.
- Inputs:
  - contains(name) → bool
  - add(name) (idempotent, persists)
  - all() → frozenset of lower-cased names
- Side effects:
  - Reads/writes {"banned": [...]} at the configured path
- Error handling:
  - Absent or malformed file → empty set, logged, never raised
"""

import threading
from typing import FrozenSet, Optional

from storage.json_file import read_json, write_json_atomic
from utils.logging_utils import get_logger

logger = get_logger("ban_list")


class BanList:
    def __init__(self, path: Optional[str] = None):
        if path is None:
            from config.app_config import BANNED_FILE
            path = BANNED_FILE
        self.path = path
        self._lock = threading.Lock()
        self._names = self._load()
        logger.info(f"[BanList] Initialized from {self.path} with {len(self._names)} names")

    def _load(self) -> set:
        data = read_json(self.path, label="BanList")
        if data is None:
            return set()
        if not isinstance(data, dict) or not isinstance(data.get("banned", []), list):
            logger.error(f"[BanList] Unexpected structure in {self.path}, starting empty")
            return set()
        return {str(n).lower() for n in data.get("banned", []) if isinstance(n, str)}

    def contains(self, name: str) -> bool:
        return (name or "").lower() in self._names

    __contains__ = contains

    def add(self, name: str) -> None:
        key = (name or "").lower()
        if not key:
            return
        with self._lock:
            if key in self._names:
                return
            self._names.add(key)
        logger.info(f"[BanList] Banned '{key}'")
        self.save()

    def all(self) -> FrozenSet[str]:
        return frozenset(self._names)

    def save(self) -> bool:
        with self._lock:
            payload = {"banned": sorted(self._names)}
            return write_json_atomic(self.path, payload, label="BanList")

    def __len__(self) -> int:
        return len(self._names)
