"""
# storage/conversation_store.py

Module Contract
- Purpose: Per-assistant conversation log persistence. One JSON array of {role, content} per profile, keyed by a filesystem-safe transform of the profile name.
- Inputs:
  - load(name) → List[ConversationMessage]
  - save(name, messages) → bool
  - path_for(name) → Path
- Key behaviors:
  - Logs are never truncated at rest; save() rewrites the full history
  - Entries with unknown roles or missing fields are skipped on load
- Side effects:
  - Writes <chat_dir>/<safe_name>_chat.json
- Error handling:
  - Absent or malformed log → empty history, logged only
"""

from pathlib import Path
from typing import Iterable, List, Optional

from storage.json_file import read_json, write_json_atomic
from storage.schema import ConversationMessage, safe_key
from utils.logging_utils import get_logger

logger = get_logger("conversation_store")


class ConversationStore:
    FILE_SUFFIX = "_chat.json"

    def __init__(self, chat_dir: Optional[str] = None):
        if chat_dir is None:
            from config.app_config import CHAT_DIR
            chat_dir = CHAT_DIR
        self.chat_dir = Path(chat_dir)

    def path_for(self, name: str) -> Path:
        return self.chat_dir / f"{safe_key(name)}{self.FILE_SUFFIX}"

    def load(self, name: str) -> List[ConversationMessage]:
        path = self.path_for(name)
        data = read_json(path, label="ConversationStore")
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error(f"[ConversationStore] {path} is not a message list, starting empty")
            return []

        messages = []
        for entry in data:
            try:
                messages.append(ConversationMessage.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"[ConversationStore] Skipping malformed entry in {path}: {e}")
        logger.debug(f"[ConversationStore] Loaded {len(messages)} messages for '{name}'")
        return messages

    def save(self, name: str, messages: Iterable[ConversationMessage]) -> bool:
        payload = [m.to_dict() for m in messages]
        return write_json_atomic(self.path_for(name), payload, label="ConversationStore")

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()
