"""Public Routes — uploads, chatbot, and health probes."""

import httpx

import storefront.infrastructure.database as db_module
from storefront.api.deps import get_chatbot
from storefront.core.errors import AnthropicAPIError
from storefront.main import app
from storefront.services.chatbot import FALLBACK_REPLY, FashionChatbot

from tests.services.mock_anthropic import MockAnthropicClient


# --- Uploads ------------------------------------------------------------------

async def test_media_upload_is_public(client, platform):
    res = await client.post(
        "/api/upload/media", files={"file": ("fit.jpg", b"\xff\xd8jpeg", "image/jpeg")},
    )
    assert res.status_code == 200
    assert res.json() == {"url": "https://cdn.example.com/upload.png"}
    body = platform.json_bodies()[0]
    assert body["model"] == "cloudflare/oss/upload"
    assert body["inputs"]["base64_data"] == "/9hqcGVn"


async def test_file_upload_requires_owner(client, platform):
    res = await client.post("/api/upload/file", files={"file": ("a.txt", b"x")})
    assert res.status_code == 403
    assert platform.requests == []


async def test_file_upload_for_owner(client, as_owner):
    res = await client.post("/api/upload/file", files={"file": ("a.txt", b"x")})
    assert res.status_code == 200


async def test_upload_without_url_is_an_upstream_error(client, platform):
    platform.handler = lambda request: httpx.Response(200, json={"status": "ok"})
    res = await client.post("/api/upload/media", files={"file": ("a.txt", b"x")})
    assert res.status_code == 502
    assert res.json()["error"]["message"] == "Upload failed: Incorrect response format"


# --- Chatbot ------------------------------------------------------------------

async def test_chatbot_replies(client, anthropic_mock):
    res = await client.post("/api/chatbot", json={"message": "  what goes with cargos?  "})
    assert res.status_code == 200
    assert res.json() == {"response": "Cuff those jeans and own it."}
    call = anthropic_mock.calls[0]
    assert call["messages"] == [{"role": "user", "content": "what goes with cargos?"}]
    assert call["model"] == "claude-test"


async def test_chatbot_falls_back_on_llm_failure(client):
    failing = MockAnthropicClient([AnthropicAPIError("down", "connection_error")])
    app.dependency_overrides[get_chatbot] = lambda: FashionChatbot(failing, "claude-test")
    res = await client.post("/api/chatbot", json={"message": "hi"})
    assert res.status_code == 200
    assert res.json() == {"response": FALLBACK_REPLY}


async def test_chatbot_rejects_blank_message(client):
    res = await client.post("/api/chatbot", json={"message": "   "})
    assert res.status_code == 400


# --- Health -------------------------------------------------------------------

async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy"}


async def test_readiness_without_database(client):
    db_module.db_manager = None
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
