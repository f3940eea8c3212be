"""HTTP surface: health check and the chat endpoint.

``POST /api/chat`` is one model round-trip; clients that run the brainstorm
loop themselves call it once per round.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, Any

import httpx
import uvicorn
from fastapi import APIRouter, Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from namer.chat import ChatGateway
from namer.config import Settings, load_settings
from namer.errors import GatewayError, NamerError, ProtocolError
from namer.factory import build_gateway
from namer.models import Message, Role, ToolInvocation, ToolResult

LOGGER = logging.getLogger(__name__)


class _Contract(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ToolCallPayload(_Contract):
    id: str
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class ToolResponsePayload(_Contract):
    id: str
    name: str
    result: Any = None


class ChatMessagePayload(_Contract):
    """Conversation turn as sent by the browser client."""

    id: str = ""
    role: str
    text: str = ""
    tool_calls: list[ToolCallPayload] | None = Field(default=None, alias="toolCalls")
    tool_responses: list[ToolResponsePayload] | None = Field(default=None, alias="toolResponses")
    is_error: bool = Field(default=False, alias="isError")

    def to_message(self) -> Message:
        role = {"model": Role.ASSISTANT, "assistant": Role.ASSISTANT, "user": Role.USER}.get(self.role, Role.SYSTEM)
        message = Message(
            role=role,
            text=self.text,
            tool_calls=[ToolInvocation(id=c.id, name=c.name, arguments=c.args) for c in self.tool_calls or []],
            tool_results=[ToolResult(id=r.id, name=r.name, result=r.result) for r in self.tool_responses or []],
            is_error=self.is_error,
        )
        if self.id:
            message.id = self.id
        return message


class ChatRequest(_Contract):
    messages: list[ChatMessagePayload] | None = None
    system_instruction: str | None = Field(default=None, alias="systemInstruction")


class ChatResponse(_Contract):
    text: str
    function_calls: list[ToolCallPayload] = Field(default_factory=list, alias="functionCalls")


class HealthResponse(_Contract):
    ok: bool
    configured: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def _cached_gateway() -> ChatGateway:
    return build_gateway(get_settings())


def get_gateway() -> ChatGateway:
    return _cached_gateway()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


router = APIRouter(prefix="/api")


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Annotated[Settings, Depends(get_settings)]) -> JSONResponse:
    """Report whether the model gateway credential is configured."""
    configured = settings.has_api_key
    return JSONResponse(
        HealthResponse(ok=configured, configured=configured).model_dump(),
        status_code=200 if configured else 500,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    settings: Annotated[Settings, Depends(get_settings)],
    gateway: Annotated[ChatGateway, Depends(get_gateway)],
) -> Any:
    """Run one model round-trip over the posted conversation."""
    if not settings.has_api_key:
        return _error(500, "Server configuration error: Missing MISTRAL_API_KEY")
    if not request.messages:
        return _error(400, "No messages provided")

    messages = [m.to_message() for m in request.messages]
    try:
        reply = await gateway.send(messages, request.system_instruction)
    except ProtocolError as exc:
        return _error(400, str(exc))
    except GatewayError as exc:
        LOGGER.error("Gateway error %d: %s", exc.status_code, exc)
        return _error(exc.status_code, str(exc))
    except (NamerError, httpx.HTTPError) as exc:
        LOGGER.exception("Chat request failed")
        return _error(500, str(exc) or "Internal Server Error")

    return ChatResponse(
        text=reply.text,
        function_calls=[ToolCallPayload(id=c.id, name=c.name, args=c.arguments) for c in reply.function_calls],
    ).model_dump(by_alias=True)


app = FastAPI(title="namer", description="Brand-name brainstorming with live domain checks")
app.include_router(router)


def serve() -> None:
    """Run the API with uvicorn using API_HOST / API_PORT."""

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
