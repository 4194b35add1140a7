"""Chat with the model about a generated strategy."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from stratgen.application.completion import complete
from stratgen.application.ports import ChatClientFactory
from stratgen.application.prompts import CHAT_SYSTEM_PROMPT
from stratgen.config.constants import PROFILE_CHAT, PROFILE_THINKING
from stratgen.config.schema import StratGenConfig
from stratgen.domain import BusinessStrategy, ChatMessage, ChatReply, Source

logger = logging.getLogger(__name__)

CHAT_ERROR_TEXT = "I encountered an error while processing your request. Please try again."

_ROLE_MAP = {"user": "user", "model": "assistant", "assistant": "assistant"}


def _image_url(image: str) -> str:
    """Accept a data URL or bare base64 (assumed JPEG)."""
    if image.startswith("data:"):
        return image
    return f"data:image/jpeg;base64,{image}"


def build_chat_messages(
    history: Sequence[ChatMessage],
    new_message: str,
    context: BusinessStrategy,
    attached_image: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Build the OpenAI message list: system prompt with the strategy, history, new turn.

    Thinking placeholders and empty turns in *history* are skipped.  An image
    turn is sent on its own (system prompt, image and message, no history).
    """
    system = CHAT_SYSTEM_PROMPT.format(context=json.dumps(context.to_json(), indent=2))
    messages: List[Dict[str, Any]] = [{"role": "system", "content": system}]
    if attached_image:
        messages.append({"role": "user", "content": [
            {"type": "image_url", "image_url": {"url": _image_url(attached_image)}},
            {"type": "text", "text": new_message},
        ]})
        return messages

    for msg in history:
        if msg.is_thinking or not msg.text:
            continue
        messages.append({"role": _ROLE_MAP.get(msg.role, "user"), "content": msg.text})
    messages.append({"role": "user", "content": new_message})
    return messages


def format_sources(sources: Sequence[Source]) -> str:
    """Markdown list of grounding links, or "" when there are none."""
    if not sources:
        return ""
    links = "".join(f"\n- [{s.title}]({s.url})" for s in sources)
    return "\n\n**Related Links:**" + links


async def chat_with_strategy(
    history: Sequence[ChatMessage],
    new_message: str,
    context: BusinessStrategy,
    use_thinking: bool = False,
    attached_image: Optional[str] = None,
    *,
    chat_client_factory: ChatClientFactory,
    config: StratGenConfig,
) -> ChatReply:
    """Answer *new_message* in the context of *context*.

    ``use_thinking`` routes the turn to the ``thinking`` profile (a reasoning
    model); otherwise the ``chat`` profile is used.  Upstream failures are
    logged and turned into an apology reply; this function does not raise
    for them.
    """
    profile = PROFILE_THINKING if use_thinking else PROFILE_CHAT
    messages = build_chat_messages(history, new_message, context, attached_image)
    logger.debug("Chat turn profile=%s history=%d image=%s", profile, len(history), bool(attached_image))
    try:
        response = await complete(chat_client_factory, config.model_for(profile), messages)
    except Exception:  # noqa: BLE001
        logger.exception("Chat request failed (profile=%s)", profile)
        return ChatReply(text=CHAT_ERROR_TEXT)

    text = response.text
    if not text and attached_image:
        text = "I analyzed the image."
    return ChatReply(text=text + format_sources(response.sources))
