"""
# core/orchestrator.py

Module Contract
- Purpose: Per-turn conversation orchestrator for one assistant profile. Appends the user message, builds the scoped system prompt and trimmed context, calls the model gateway off the event loop, sanitizes and persists the answer.
- Inputs:
  - submit(text) → TurnResult (coroutine)
  - start(text, on_done=?) → asyncio.Task | None (fire-and-forget with a cancellable handle)
  - Wired collaborators: AssistantProfile, ConversationStore, ModelGateway
- Outputs:
  - TurnResult(status, message?, error?)
- State machine:
  - IDLE --submit--> AWAITING_RESPONSE --gateway result--> IDLE
  - Empty text or a submit while AWAITING_RESPONSE is rejected (no-op), never queued.
- Greeting shortcut:
  - "hi", "hi!", "hi." (case-insensitive) are answered locally from the profile's name and purpose, quoted verbatim (not sanitized); the gateway is never called.
- Async behavior:
  - gateway.send runs in a worker thread via asyncio.to_thread; history/state are only touched on the event loop thread.
- Side effects:
  - Writes the conversation log via ConversationStore after each completed turn.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from core.prompt_builder import system_prompt_for
from core.response_sanitizer import sanitize
from storage.conversation_store import ConversationStore
from storage.schema import AssistantProfile, ConversationMessage
from utils.logging_utils import get_logger, log_async_operation

logger = get_logger("orchestrator")

GREETINGS = frozenset({"hi", "hi!", "hi."})
GREETING_TEMPLATE = "Hi! I'm {name}. I specialize in {purpose}. How can I help you today?"


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


class TurnStatus(str, Enum):
    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class TurnResult:
    status: TurnStatus
    message: Optional[ConversationMessage] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == TurnStatus.COMPLETED


def is_greeting(text: str) -> bool:
    return (text or "").strip().lower() in GREETINGS


def build_greeting(profile: Optional[AssistantProfile]) -> str:
    name = profile.name if profile else "this assistant"
    purpose = profile.purpose.strip() if profile and profile.purpose and profile.purpose.strip() else "my defined area"
    return GREETING_TEMPLATE.format(name=name, purpose=purpose)


class ConversationOrchestrator:
    """Runs conversation turns for a single assistant profile."""

    def __init__(self, profile: AssistantProfile, conversation_store: ConversationStore, gateway):
        self.profile = profile
        self.conversation_store = conversation_store
        self.gateway = gateway
        self.state = TurnState.IDLE
        self._history: List[ConversationMessage] = conversation_store.load(profile.name)
        logger.debug(f"[Orchestrator] Opened '{profile.name}' with {len(self._history)} saved messages")

    @property
    def history(self) -> List[ConversationMessage]:
        return list(self._history)

    @property
    def is_busy(self) -> bool:
        return self.state == TurnState.AWAITING_RESPONSE

    def reload(self) -> None:
        if self.is_busy:
            raise RuntimeError("Cannot reload history while a response is pending")
        self._history = self.conversation_store.load(self.profile.name)

    def can_submit(self, text: str) -> bool:
        return bool((text or "").strip()) and not self.is_busy

    def _persist(self) -> None:
        if not self.conversation_store.save(self.profile.name, self._history):
            logger.error(f"[Orchestrator] Could not persist conversation for '{self.profile.name}'")

    def _append_assistant(self, content: str, clean: bool = True) -> ConversationMessage:
        reply = ConversationMessage.assistant(sanitize(content) if clean else content)
        self._history.append(reply)
        self._persist()
        return reply

    @log_async_operation
    async def submit(self, text: str) -> TurnResult:
        text = (text or "").strip()
        if not text:
            return TurnResult(TurnStatus.REJECTED, error="Message is empty")
        if self.is_busy:
            logger.debug(f"[Orchestrator] Rejected submit for '{self.profile.name}': response pending")
            return TurnResult(TurnStatus.REJECTED, error="A response is already pending")

        self._history.append(ConversationMessage.user(text))

        if is_greeting(text):
            reply = self._append_assistant(build_greeting(self.profile), clean=False)
            return TurnResult(TurnStatus.COMPLETED, message=reply)

        self.state = TurnState.AWAITING_RESPONSE
        try:
            system_prompt = system_prompt_for(self.profile)
            window = self.gateway.context_messages
            context = self._history[-window:] if window > 0 else []
            result = await asyncio.to_thread(self.gateway.send, system_prompt, context)

            if not result.ok:
                logger.warning(f"[Orchestrator] Turn failed for '{self.profile.name}': {result.failure}")
                return TurnResult(TurnStatus.FAILED, error=result.message)

            reply = self._append_assistant(result.text)
            return TurnResult(TurnStatus.COMPLETED, message=reply)
        finally:
            self.state = TurnState.IDLE

    def start(self, text: str,
              on_done: Optional[Callable[[TurnResult], None]] = None) -> Optional["asyncio.Task"]:
        """Schedule a turn on the running loop; None if it would be rejected.

        on_done is invoked on the loop thread once the turn resolves.
        """
        if not self.can_submit(text):
            return None
        task = asyncio.get_running_loop().create_task(self.submit(text))
        if on_done is not None:
            def _deliver(t: "asyncio.Task") -> None:
                if not t.cancelled() and t.exception() is None:
                    on_done(t.result())
            task.add_done_callback(_deliver)
        return task
