"""HTTP API: FastAPI app serving strategy generation, chat and extraction to the dashboard."""

from __future__ import annotations

import hmac
import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from stratgen.application.chat import chat_with_strategy
from stratgen.application.generate_strategy import generate_strategy
from stratgen.application.json_parsing import extract_json
from stratgen.config import load_config
from stratgen.domain import (
    BusinessStrategy,
    ChatMessage,
    ExtractionError,
    StrategyGenerationError,
    UserInput,
)
from stratgen.infrastructure.chat import build_chat_client

logger = logging.getLogger(__name__)

app = FastAPI(title="stratgen")


@app.middleware("http")
async def _auth_middleware(request: Request, call_next):
    """Optional bearer-token authentication.

    Active only when ``STRATGEN_HTTP_API_KEY`` is set.  When active, every
    endpoint except ``GET /health`` requires an ``Authorization: Bearer <key>``
    header.  Uses constant-time comparison.
    """
    api_key = os.environ.get("STRATGEN_HTTP_API_KEY", "").strip()
    if api_key and request.url.path != "/health":
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={"error": "Unauthorized", "detail": "Authorization: Bearer <key> header required"},
                headers={"WWW-Authenticate": "Bearer"},
            )
        token = auth_header[len("Bearer "):]
        if not hmac.compare_digest(token.encode(), api_key.encode()):
            return JSONResponse(
                status_code=401,
                content={"error": "Unauthorized", "detail": "Invalid API key"},
                headers={"WWW-Authenticate": "Bearer"},
            )
    return await call_next(request)


class StrategyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    industry: str
    description: str = ""
    location_type: str = Field("", alias="locationType")
    market_reach: str = Field("", alias="marketReach")
    budget: str = ""
    target_customers: str = Field("", alias="targetCustomers")


class ChatMessageIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    role: str
    text: str = ""
    is_thinking: bool = Field(False, alias="isThinking")
    image: Optional[str] = None


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    history: List[ChatMessageIn] = Field(default_factory=list)
    message: str
    context: Dict[str, Any]
    use_thinking: bool = Field(False, alias="useThinking")
    image: Optional[str] = None


class ExtractRequest(BaseModel):
    text: str


def _llm_unavailable(e: httpx.HTTPError) -> HTTPException:
    if isinstance(e, httpx.HTTPStatusError):
        return HTTPException(status_code=503, detail=f"LLM server error: {e.response.status_code}.")
    return HTTPException(status_code=503, detail=f"LLM server unreachable: {e}.")


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/strategy")
async def strategy(req: StrategyRequest):
    logger.info("POST /strategy industry=%r reach=%r", req.industry[:80], req.market_reach[:80])
    config = load_config()
    user_input = UserInput(
        industry=req.industry,
        description=req.description,
        location_type=req.location_type,
        market_reach=req.market_reach,
        budget=req.budget,
        target_customers=req.target_customers,
    )
    try:
        result = await generate_strategy(user_input, chat_client_factory=build_chat_client, config=config)
    except StrategyGenerationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except httpx.HTTPError as e:
        raise _llm_unavailable(e)
    return result.to_json()


@app.post("/chat")
async def chat(req: ChatRequest):
    logger.info("POST /chat history=%d thinking=%s image=%s", len(req.history), req.use_thinking, bool(req.image))
    config = load_config()
    history = [
        ChatMessage(role=m.role, text=m.text, id=m.id, is_thinking=m.is_thinking, image=m.image)
        for m in req.history
    ]
    reply = await chat_with_strategy(
        history,
        req.message,
        BusinessStrategy.from_json(req.context),
        use_thinking=req.use_thinking,
        attached_image=req.image,
        chat_client_factory=build_chat_client,
        config=config,
    )
    return {"text": reply.text}


@app.post("/extract")
def extract(req: ExtractRequest):
    try:
        value = extract_json(req.text)
    except ExtractionError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "extraction_failed", "reason": e.reason, "candidates": e.candidates},
        )
    return {"value": value}
