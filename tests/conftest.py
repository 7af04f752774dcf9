"""Shared fixtures: explicit Settings (no .env, no ambient env) and app builders."""

from typing import Callable

import pytest
from fastapi import APIRouter, Cookie, Request
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field

from app.config import Settings
from app.main import create_app


class OutgoingMessage(BaseModel):
    text: str = Field(min_length=1)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides) -> Settings:
        values = {
            "APP_ENV": "development",
            "FRONTEND_URL": None,
            "MONGODB_URI": None,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def handler_calls() -> list:
    return []


@pytest.fixture
def auth_router(handler_calls: list) -> APIRouter:
    """Stand-in auth group: echoes the parsed JSON body and session cookie."""
    router = APIRouter()

    @router.post("/login")
    async def login(request: Request, jwt: str | None = Cookie(None)):
        handler_calls.append("login")
        body = await request.json()
        return {"email": body.get("email"), "cookie": jwt}

    return router


@pytest.fixture
def message_router(handler_calls: list) -> APIRouter:
    router = APIRouter()

    @router.get("/users")
    async def users():
        handler_calls.append("users")
        return {"users": []}

    @router.post("/send/{receiver_id}")
    async def send(receiver_id: str, payload: OutgoingMessage):
        handler_calls.append("send")
        return {"receiver_id": receiver_id, "text": payload.text}

    @router.get("/boom")
    async def boom():
        handler_calls.append("boom")
        raise RuntimeError("handler exploded")

    return router


@pytest.fixture
def build_app(make_settings, auth_router, message_router):
    def _build(**overrides):
        return create_app(
            make_settings(**overrides),
            auth_router=auth_router,
            message_router=message_router,
        )
    return _build


@pytest.fixture
def make_client() -> Callable[..., AsyncClient]:
    def _make(app, raise_app_exceptions: bool = True) -> AsyncClient:
        transport = ASGITransport(
            app=app, client=("127.0.0.1", 9999), raise_app_exceptions=raise_app_exceptions
        )
        return AsyncClient(transport=transport, base_url="http://test")
    return _make
