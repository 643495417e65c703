"""
# storage/schema.py

Module Contract
- Purpose: Data structures shared by the stores: assistant profiles, conversation messages and the reasons a profile creation can be refused.
- Inputs:
  - AssistantProfile.to_dict() / AssistantProfile.from_dict(data)
  - ConversationMessage.to_dict() / ConversationMessage.from_dict(data)
  - safe_key(name) → filesystem-safe identifier
- Outputs:
  - Dataclass instances and their JSON-ready dictionaries
  - CreationRejection enum values with user-facing messages
- Side effects:
  - None (pure data structures)
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def safe_key(name: str) -> str:
    """Filesystem-safe transform of a profile name."""
    return _UNSAFE_KEY_CHARS.sub("_", name or "")


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class CreationRejection(str, Enum):
    """Why a profile creation was refused."""
    MISSING_CREATOR = "missing_creator"
    MISSING_NAME = "missing_name"
    PURPOSE_TOO_SHORT = "purpose_too_short"
    NAME_BANNED = "name_banned"

    @property
    def message(self) -> str:
        return REJECTION_MESSAGES[self]


REJECTION_MESSAGES: Dict[CreationRejection, str] = {
    CreationRejection.MISSING_CREATOR: "Please enter your name.",
    CreationRejection.MISSING_NAME: "Please enter an AI name.",
    CreationRejection.PURPOSE_TOO_SHORT: (
        "Please provide a detailed description (at least 15 characters) of the AI's purpose. "
        "The AI will strictly follow this description and reject any questions outside this scope."
    ),
    CreationRejection.NAME_BANNED: (
        "This AI name has been banned due to poor performance. Please choose a different name."
    ),
}


@dataclass
class AssistantProfile:
    """A narrowly-scoped assistant persona.

    Persisted as {name, description, imagePath, creator}; `purpose` maps to
    the stored `description` field.
    """
    name: str
    purpose: str
    creator: Optional[str] = None
    image_ref: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.purpose,
            "imagePath": self.image_ref,
            "creator": self.creator,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssistantProfile":
        """Build from a stored record; raises ValueError when `name` is not text."""
        name = data.get("name")
        if name is not None and not isinstance(name, str):
            raise ValueError(f"profile name must be a string, got {type(name).__name__}")
        purpose = data.get("description")
        creator = data.get("creator")
        image_ref = data.get("imagePath")
        return cls(
            name=name or "Unnamed",
            purpose=purpose if isinstance(purpose, str) else "",
            creator=creator if isinstance(creator, str) else None,
            image_ref=image_ref if isinstance(image_ref, str) else None,
        )

    @property
    def key(self) -> str:
        return safe_key(self.name)


@dataclass
class ConversationMessage:
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversationMessage":
        return cls(role=Role(data["role"]), content=str(data["content"]))

    @classmethod
    def user(cls, content: str) -> "ConversationMessage":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> "ConversationMessage":
        return cls(Role.ASSISTANT, content)


@dataclass
class CreationResult:
    """Outcome of ProfileStore.create: exactly one of profile/rejection is set."""
    profile: Optional[AssistantProfile] = None
    rejection: Optional[CreationRejection] = None

    @property
    def ok(self) -> bool:
        return self.profile is not None
