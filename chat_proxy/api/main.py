"""
FastAPI service exposing the chat proxy.
"""

from __future__ import annotations

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chat_proxy.config import ProxySettings, load_env, load_settings
from chat_proxy.handler import ChatHandler
from chat_proxy.logging_utils import RequestLogger, setup_logging
from chat_proxy.models import HttpResult
from chat_proxy.upstream import CompletionProvider, OpenRouterProvider

setup_logging()

CHAT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
DISCONNECT_POLL_SECONDS = 0.25
CLIENT_CLOSED_REQUEST = 499


def create_app(
    settings: Optional[ProxySettings] = None,
    provider: Optional[CompletionProvider] = None,
) -> FastAPI:
    """
    Build the app. Settings default to the environment; the provider defaults to
    OpenRouter over a client shared for the app lifetime.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings
        if resolved is None:
            load_env()
            resolved = load_settings()

        if provider is not None:
            app.state.chat_handler = ChatHandler(resolved, provider)
            yield
        else:
            async with httpx.AsyncClient(timeout=resolved.timeout) as client:
                app.state.chat_handler = ChatHandler(resolved, OpenRouterProvider(resolved, client))
                yield
        app.state.chat_handler = None

    app = FastAPI(title="Chat Proxy API", version="0.1.0", lifespan=lifespan)

    @app.get("/health", response_model=dict)
    async def health() -> dict:
        return {"status": "ok"}

    @app.api_route("/api/chat", methods=CHAT_METHODS)
    async def chat_endpoint(request: Request) -> JSONResponse:
        handler: ChatHandler = request.app.state.chat_handler
        request_logger = RequestLogger("api.chat", context={"request_id": str(uuid.uuid4())})
        request_logger.debug("Received chat request", method=request.method)

        body = await request.body()
        result = await run_until_disconnect(
            request,
            handler.handle(request.method, body, logger=request_logger),
        )
        if result is None:
            request_logger.warning("Client disconnected; upstream call cancelled")
            return JSONResponse(status_code=CLIENT_CLOSED_REQUEST, content={"error": "Client closed request"})

        request_logger.info("Responding to client", status_code=result.status_code)
        return _to_response(result)

    return app


async def run_until_disconnect(
    request: Request,
    work: Awaitable[HttpResult],
    *,
    poll_interval: float = DISCONNECT_POLL_SECONDS,
) -> Optional[HttpResult]:
    """
    Await ``work`` while watching the inbound connection; cancel it if the caller goes away.
    Returns None when the work was cancelled.
    """

    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                return None
    finally:
        if not task.done():
            task.cancel()


def _to_response(result: HttpResult) -> JSONResponse:
    content: Any = dict(result.body)
    return JSONResponse(status_code=result.status_code, content=content)


app = create_app()


if __name__ == "__main__":
    uvicorn.run("chat_proxy.api.main:app", host="0.0.0.0", port=8000)
