"""
# core/workspace.py

Module Contract
- Purpose: Application-level wiring shared by the GUI and CLI. Holds the stores and the gateway, and keeps the single active conversation session.
- Inputs:
  - create_assistant(name, purpose, creator) → CreationResult
  - ban_assistant(name)
  - list_assistants() / get_assistant(name)
  - open_session(name) → ConversationOrchestrator
- Key behaviors:
  - Only one session is active at a time; opening another profile replaces it.
  - Banning the active profile drops its session; its log stays on disk.
- Error handling:
  - open_session() raises KeyError for unknown or banned names.
"""
from typing import List, Optional

from core.orchestrator import ConversationOrchestrator
from core.prompt_builder import is_math_purpose
from storage.conversation_store import ConversationStore
from storage.profile_store import ProfileStore
from storage.schema import AssistantProfile, CreationResult
from utils.logging_utils import get_logger

logger = get_logger("workspace")


def assistant_type_label(profile: AssistantProfile) -> str:
    return "Math-focused AI Assistant" if is_math_purpose(profile.purpose) else "AI Assistant"


def describe_creation(profile: AssistantProfile) -> str:
    """Confirmation text shown after a profile is created."""
    return (
        "AI Profile Created Successfully!\n\n"
        f"Name: {profile.name}\n"
        f"Creator: {profile.creator}\n"
        f"Type: {assistant_type_label(profile)}\n\n"
        "This AI will STRICTLY focus only on its defined purpose."
    )


class AssistantWorkspace:
    def __init__(self, profile_store: ProfileStore, conversation_store: ConversationStore, gateway):
        self.profile_store = profile_store
        self.conversation_store = conversation_store
        self.gateway = gateway
        self.active_session: Optional[ConversationOrchestrator] = None

    def create_assistant(self, name: str, purpose: str, creator: str) -> CreationResult:
        result = self.profile_store.create(name, purpose, creator)
        # An overwritten profile must not keep serving its old purpose
        if result.ok and self.active_session and self.active_session.profile.name == result.profile.name:
            self.active_session.profile = result.profile
        return result

    def ban_assistant(self, name: str) -> None:
        self.profile_store.ban(name)
        if self.active_session and self.active_session.profile.name.lower() == (name or "").lower():
            logger.info(f"[Workspace] Closing session for banned assistant '{name}'")
            self.active_session = None

    def list_assistants(self) -> List[AssistantProfile]:
        return self.profile_store.list_profiles()

    def get_assistant(self, name: str) -> Optional[AssistantProfile]:
        return self.profile_store.get(name)

    def open_session(self, name: str) -> ConversationOrchestrator:
        if self.active_session and self.active_session.profile.name == name:
            return self.active_session
        profile = self.profile_store.get(name)
        if profile is None:
            raise KeyError(f"Unknown assistant: {name}")
        self.active_session = ConversationOrchestrator(profile, self.conversation_store, self.gateway)
        logger.info(f"[Workspace] Active session: '{name}'")
        return self.active_session

    def close(self) -> None:
        self.active_session = None
        self.gateway.close()
