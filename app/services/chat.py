"""
AI chat companion.

ChatClient   — thin wrapper over the OpenAI chat completions API. Every
               failure surfaces as ChatTransportError.
ChatService  — what the router calls. Transport failures are recovered
               with a fixed supportive reply so the user always gets an
               answer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from openai import APIStatusError, AsyncOpenAI, OpenAIError

from app.core.errors import ChatTransportError

logger = logging.getLogger(__name__)


DEFAULT_SYSTEM_PROMPT = (
    "You are a warm, supportive wellness companion inside an anxiety relief app. "
    "Listen carefully, respond with empathy, keep answers short and practical, and "
    "suggest breathing exercises or journaling when they could help. You are not a "
    "therapist: if the user mentions self-harm or a crisis, encourage them to "
    "contact local emergency services or a crisis line."
)

FALLBACK_REPLY = (
    "I apologize, but I'm having trouble connecting right now. In the meantime, try "
    "taking a few deep breaths or use one of the breathing exercises in the app. Is "
    "there anything specific about your anxiety you'd like to talk about?"
)


@dataclass(frozen=True)
class ChatMessage:
    content: str
    is_from_user: bool
    sent_at: Optional[datetime] = None


@dataclass(frozen=True)
class ChatReply:
    content: str
    fallback: bool
    sent_at: datetime


def build_messages(
    text: str,
    history: Sequence[ChatMessage],
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    messages = [{"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT}]
    for message in history:
        messages.append({
            "role": "user" if message.is_from_user else "assistant",
            "content": message.content,
        })
    messages.append({"role": "user", "content": text})
    return messages


class ChatClient:
    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        max_tokens: int = 500,
        temperature: float = 0.7,
        timeout: float = 30.0,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: Optional[AsyncOpenAI] = None
        if api_key:
            self._client = AsyncOpenAI(api_key=api_key, timeout=timeout)
            logger.info("OpenAI chat client configured (model=%s)", model)
        else:
            logger.warning("OPENAI_API_KEY not set — chat replies will use the fallback message")

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def send_message(
        self,
        text: str,
        history: Sequence[ChatMessage] = (),
        system_prompt: Optional[str] = None,
    ) -> str:
        if self._client is None:
            raise ChatTransportError("OpenAI API key not configured")

        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=build_messages(text, history, system_prompt),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except APIStatusError as exc:
            raise ChatTransportError(f"API error: {exc.status_code}", status_code=exc.status_code) from exc
        except OpenAIError as exc:
            raise ChatTransportError(f"Network error: {exc}") from exc

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            raise ChatTransportError("Invalid response from API")
        return content.strip()


class ChatService:
    def __init__(self, client: ChatClient):
        self._client = client

    async def reply(
        self,
        text: str,
        history: Sequence[ChatMessage] = (),
        system_prompt: Optional[str] = None,
    ) -> ChatReply:
        try:
            content = await self._client.send_message(text, history, system_prompt)
        except ChatTransportError as exc:
            logger.warning("Chat completion failed, using fallback reply: %s", exc.message)
            return ChatReply(content=FALLBACK_REPLY, fallback=True, sent_at=datetime.now())
        return ChatReply(content=content, fallback=False, sent_at=datetime.now())
