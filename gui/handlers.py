"""
# gui/handlers.py

Module Contract
- Purpose: UI-agnostic handlers behind the Gradio app: create/ban assistants, open a session, and run a chat submission.
- Inputs:
  - handle_create(workspace, creator, name, purpose) → (status, choices)
  - handle_select(workspace, name) → (messages, status)
  - handle_submit(workspace, name, user_text) → (messages, input_value, status)  [async]
  - handle_ban(workspace, name) → (status, choices, messages)
- Outputs:
  - Chatbot-ready message dicts {role, content}; status strings for inline display.
- Side effects:
  - Persists through the workspace stores; no direct file access here.
"""
import logging
from typing import Dict, List, Optional, Tuple

from core.orchestrator import TurnStatus
from core.workspace import AssistantWorkspace, describe_creation
from utils.logging_utils import log_and_time

logger = logging.getLogger("gradio_gui")


def assistant_choices(workspace: AssistantWorkspace) -> List[str]:
    return [p.name for p in workspace.list_assistants()]


def chat_messages(session) -> List[Dict[str, str]]:
    if session is None:
        return []
    return [m.to_dict() for m in session.history]


def handle_create(workspace: AssistantWorkspace, creator: str, name: str,
                  purpose: str) -> Tuple[str, List[str]]:
    result = workspace.create_assistant(name, purpose, creator)
    if not result.ok:
        return result.rejection.message, assistant_choices(workspace)
    return describe_creation(result.profile), assistant_choices(workspace)


def handle_select(workspace: AssistantWorkspace, name: Optional[str]) -> Tuple[List[Dict[str, str]], str]:
    if not name:
        return [], ""
    try:
        session = workspace.open_session(name)
    except KeyError:
        return [], f"Assistant '{name}' is not available."
    return chat_messages(session), f"Chatting with {session.profile.name}: {session.profile.purpose}"


@log_and_time("Handle Submit")
async def handle_submit(workspace: AssistantWorkspace, name: Optional[str],
                        user_text: str) -> Tuple[List[Dict[str, str]], str, str]:
    if not name:
        return [], user_text, "Select an assistant first."
    try:
        session = workspace.open_session(name)
    except KeyError:
        return [], user_text, f"Assistant '{name}' is not available."

    logger.debug(f"[Handle Submit] Received user_text for '{name}': {user_text}")
    result = await session.submit(user_text)

    if result.status == TurnStatus.REJECTED:
        return chat_messages(session), user_text, result.error or ""
    if result.status == TurnStatus.FAILED:
        return chat_messages(session), "", f"Error: {result.error}"
    return chat_messages(session), "", ""


def handle_ban(workspace: AssistantWorkspace, name: Optional[str]) -> Tuple[str, List[str], List[Dict[str, str]]]:
    if not name:
        return "Select an assistant first.", assistant_choices(workspace), []
    workspace.ban_assistant(name)
    return f"AI '{name}' has been removed from your list.", assistant_choices(workspace), []
