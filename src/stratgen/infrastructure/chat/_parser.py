"""Response parser for OpenAI chat-completions responses.

Keeps the wire-format knowledge (content parts, citation annotations) in one
place so the client only deals with transport.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from stratgen.domain import LLMResponse, Source


def _content_text(content: Any) -> Optional[str]:
    """Message content is a string, or a list of typed parts on some providers."""
    if content is None or isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [
            p.get("text") or ""
            for p in content
            if isinstance(p, dict) and p.get("type") == "text"
        ]
        return "".join(parts)
    return str(content)


def _sources(message: Dict[str, Any]) -> List[Source]:
    """Collect ``url_citation`` annotations, de-duplicated by URL in order."""
    sources: List[Source] = []
    seen = set()
    for ann in message.get("annotations") or []:
        if not isinstance(ann, dict) or ann.get("type") != "url_citation":
            continue
        citation = ann.get("url_citation") or {}
        url = citation.get("url")
        if not url or url in seen:
            continue
        seen.add(url)
        sources.append(Source(title=citation.get("title") or "Web Source", url=url))
    return sources


def parse_chat_response(data: Dict[str, Any]) -> LLMResponse:
    """Parse an OpenAI-format chat completions response dict into ``LLMResponse``."""
    message = data["choices"][0]["message"]
    return LLMResponse(content=_content_text(message.get("content")), sources=_sources(message))
