"""
# storage/profile_store.py

Module Contract
- Purpose: Owns the collection of assistant profiles for the process lifetime. Validates and admits new profiles (BanList has veto power), persists the whole collection, and removes profiles on ban.
- Inputs:
  - create(name, purpose, creator) → CreationResult
  - ban(name)
  - load() → Dict[str, AssistantProfile]
  - get(name), list_profiles(), save()
- Outputs:
  - AssistantProfile instances keyed by exact name
- Key behaviors:
  - Validation order: creator, name, purpose length (trimmed, ≥ min length), ban check
  - Re-creating an existing name overwrites the previous entry
  - Banned names are filtered on load and never written on save
- Side effects:
  - Writes {"profiles": [...]} to the configured path (atomic temp-file swap)
  - ban() also persists the BanList; conversation logs are left on disk
- Error handling:
  - Malformed/unreadable store → empty collection, logged only
"""

import threading
from typing import Dict, List, Optional

from storage.ban_list import BanList
from storage.json_file import read_json, write_json_atomic
from storage.schema import AssistantProfile, CreationRejection, CreationResult
from utils.logging_utils import get_logger

logger = get_logger("profile_store")


class ProfileStore:
    def __init__(self,
                 path: Optional[str] = None,
                 ban_list: Optional[BanList] = None,
                 min_purpose_length: Optional[int] = None):
        if path is None or min_purpose_length is None:
            from config.app_config import PROFILES_FILE, MIN_PURPOSE_LENGTH
            path = path or PROFILES_FILE
            min_purpose_length = MIN_PURPOSE_LENGTH if min_purpose_length is None else min_purpose_length
        self.path = path
        self.ban_list = ban_list if ban_list is not None else BanList()
        self.min_purpose_length = min_purpose_length
        self._lock = threading.Lock()
        self.profiles: Dict[str, AssistantProfile] = {}

    def load(self) -> Dict[str, AssistantProfile]:
        """Replace the live collection with what is on disk, minus banned names."""
        loaded: Dict[str, AssistantProfile] = {}
        data = read_json(self.path, label="ProfileStore")
        records = data.get("profiles") if isinstance(data, dict) else None

        if data is not None and not isinstance(records, list):
            logger.error(f"[ProfileStore] Unexpected structure in {self.path}, starting empty")
            records = None

        for record in records or []:
            if not isinstance(record, dict):
                continue
            try:
                profile = AssistantProfile.from_dict(record)
            except ValueError as e:
                logger.warning(f"[ProfileStore] Skipping malformed profile record: {e}")
                continue
            if self.ban_list.contains(profile.name):
                logger.debug(f"[ProfileStore] Skipping banned profile '{profile.name}'")
                continue
            loaded[profile.name] = profile

        with self._lock:
            self.profiles = loaded
        logger.info(f"[ProfileStore] Loaded {len(loaded)} profiles from {self.path}")
        return dict(loaded)

    def validate(self, name: str, purpose: str, creator: str) -> Optional[CreationRejection]:
        if not creator:
            return CreationRejection.MISSING_CREATOR
        if not name:
            return CreationRejection.MISSING_NAME
        if len(purpose) < self.min_purpose_length:
            return CreationRejection.PURPOSE_TOO_SHORT
        if self.ban_list.contains(name):
            return CreationRejection.NAME_BANNED
        return None

    def create(self, name: str, purpose: str, creator: str) -> CreationResult:
        name = (name or "").strip()
        purpose = (purpose or "").strip()
        creator = (creator or "").strip()

        rejection = self.validate(name, purpose, creator)
        if rejection is not None:
            logger.info(f"[ProfileStore] Rejected '{name}': {rejection.value}")
            return CreationResult(rejection=rejection)

        profile = AssistantProfile(name=name, purpose=purpose, creator=creator)
        with self._lock:
            if name in self.profiles:
                logger.warning(f"[ProfileStore] Overwriting existing profile '{name}'")
            self.profiles[name] = profile
        self.save()
        logger.info(f"[ProfileStore] Created profile '{name}' by '{creator}'")
        return CreationResult(profile=profile)

    def ban(self, name: str) -> None:
        """Remove the profile and bar its name from future creation."""
        self.ban_list.add(name)
        with self._lock:
            for key in [k for k in self.profiles if k.lower() == (name or "").lower()]:
                del self.profiles[key]
        self.save()
        logger.info(f"[ProfileStore] Banned and removed '{name}'")

    def save(self) -> bool:
        with self._lock:
            records = [
                p.to_dict() for p in self.profiles.values()
                if not self.ban_list.contains(p.name)
            ]
        return write_json_atomic(self.path, {"profiles": records}, label="ProfileStore")

    def get(self, name: str) -> Optional[AssistantProfile]:
        return self.profiles.get(name)

    def list_profiles(self) -> List[AssistantProfile]:
        return list(self.profiles.values())

    def __contains__(self, name: str) -> bool:
        return name in self.profiles

    def __len__(self) -> int:
        return len(self.profiles)
