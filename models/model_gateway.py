"""
# models/model_gateway.py

Module Contract
- Purpose: Send a chat-completion request to the provider (OpenRouter-compatible), walking an ordered list of model candidates and classifying failures.
- Inputs:
  - send(system_prompt, history) → GatewayResult
- Outputs:
  - GatewayResult.text on success; GatewayResult.failure + user-facing message otherwise
- Key behaviors:
  - Payload: system message + at most the last `context_messages` history entries (oldest-first), fixed temperature/max_tokens/top_p
  - 200 → first completion's content; empty content → EMPTY_RESPONSE
  - non-200 with an invalid-model marker in the body → try the next candidate
  - any other non-200 → stop immediately (PROVIDER_ERROR)
  - request errors (timeout, connection, redirects, decoding, bad URL) → next candidate
  - all candidates exhausted → EXHAUSTED with the fallback message
- Dependencies:
  - httpx; credentials, endpoint and model list from config.app_config / environment
- Side effects:
  - Maintains an HTTP client; exposes close() / context-manager support.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

import httpx

from config.app_config import (
    CONNECT_TIMEOUT,
    CONTEXT_MESSAGES,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    INVALID_MODEL_MARKERS,
    PROVIDER_API_KEY,
    PROVIDER_BASE_URL,
    PROVIDER_MODELS,
    READ_TIMEOUT,
)
from storage.schema import ConversationMessage
from utils.logging_utils import get_logger, log_and_time

logger = get_logger("model_gateway")

FALLBACK_MESSAGE = (
    "I cannot process that request right now. "
    "Please check your internet connection and try again."
)
EMPTY_RESPONSE_MESSAGE = "Failed to get response from AI. Please try again."
NOT_CONFIGURED_MESSAGE = "No API key is configured for the AI service. Set OPENROUTER_API_KEY and try again."


class GatewayFailure(str, Enum):
    PROVIDER_ERROR = "provider_error"
    EMPTY_RESPONSE = "empty_response"
    EXHAUSTED = "exhausted"
    NOT_CONFIGURED = "not_configured"


@dataclass
class GatewayResult:
    text: Optional[str] = None
    model: Optional[str] = None
    failure: Optional[GatewayFailure] = None
    message: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and bool(self.text)


class ModelGateway:
    """Chat-completions client with ordered model fallback."""

    def __init__(self,
                 api_key: Optional[str] = None,
                 models: Optional[Sequence[str]] = None,
                 base_url: Optional[str] = None,
                 temperature: float = DEFAULT_TEMPERATURE,
                 max_tokens: int = DEFAULT_MAX_TOKENS,
                 top_p: float = DEFAULT_TOP_P,
                 context_messages: int = CONTEXT_MESSAGES,
                 invalid_model_markers: Optional[Sequence[str]] = None,
                 http_client: Optional[httpx.Client] = None):
        self.api_key = api_key if api_key is not None else PROVIDER_API_KEY
        self.models = list(models) if models else list(PROVIDER_MODELS)
        self.base_url = (base_url or PROVIDER_BASE_URL).rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.top_p = top_p
        self.context_messages = context_messages
        self.invalid_model_markers = [
            m.lower() for m in (invalid_model_markers or INVALID_MODEL_MARKERS)
        ]
        self.client = http_client or httpx.Client(
            timeout=httpx.Timeout(READ_TIMEOUT, connect=CONNECT_TIMEOUT),
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_messages(self, system_prompt: str,
                       history: Sequence[ConversationMessage]) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": system_prompt}]
        recent = list(history)[-self.context_messages:] if self.context_messages > 0 else []
        messages.extend(m.to_dict() for m in recent)
        return messages

    def build_payload(self, model: str, messages: List[Dict[str, str]]) -> Dict:
        return {
            "model": model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def is_invalid_model_error(self, body: str) -> bool:
        lowered = (body or "").lower()
        return any(marker in lowered for marker in self.invalid_model_markers)

    @staticmethod
    def extract_content(data) -> Optional[str]:
        """choices[0].message.content, raising on an unexpected shape."""
        return data["choices"][0]["message"]["content"]

    @log_and_time("ModelGateway Send")
    def send(self, system_prompt: str,
             history: Sequence[ConversationMessage]) -> GatewayResult:
        if not self.api_key:
            logger.error("[ModelGateway] No API key configured, skipping request")
            return GatewayResult(failure=GatewayFailure.NOT_CONFIGURED, message=NOT_CONFIGURED_MESSAGE)

        messages = self.build_messages(system_prompt, history)
        logger.debug(f"[ModelGateway] Sending {len(messages)} messages (incl. system)")

        for model in self.models:
            payload = self.build_payload(model, messages)
            try:
                response = self.client.post(self.endpoint, json=payload, headers=self._headers())
            except (httpx.RequestError, httpx.InvalidURL) as e:
                logger.warning(f"[ModelGateway] Request error on '{model}': {type(e).__name__}: {e}")
                continue

            if response.status_code == 200:
                try:
                    content = self.extract_content(response.json())
                except (ValueError, KeyError, IndexError, TypeError) as e:
                    logger.warning(f"[ModelGateway] Malformed success body from '{model}': {e}")
                    continue
                if not content or not str(content).strip():
                    logger.warning(f"[ModelGateway] Empty completion from '{model}'")
                    return GatewayResult(model=model, failure=GatewayFailure.EMPTY_RESPONSE,
                                         message=EMPTY_RESPONSE_MESSAGE, status_code=200)
                logger.info(f"[ModelGateway] Completion received from '{model}'")
                return GatewayResult(text=str(content), model=model, status_code=200)

            body = response.text
            if self.is_invalid_model_error(body):
                logger.warning(f"[ModelGateway] Model '{model}' rejected as invalid, trying next candidate")
                continue

            logger.error(f"[ModelGateway] API Error: {response.status_code} - {body}")
            return GatewayResult(model=model, failure=GatewayFailure.PROVIDER_ERROR,
                                 message=FALLBACK_MESSAGE, status_code=response.status_code)

        logger.error(f"[ModelGateway] All model candidates exhausted: {self.models}")
        return GatewayResult(failure=GatewayFailure.EXHAUSTED, message=FALLBACK_MESSAGE)

    def close(self):
        """Close the HTTP client to avoid socket leaks."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
