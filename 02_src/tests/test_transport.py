"""Tests for WhatsAppTransport."""

import json

import httpx
import pytest

from convo.delivery import WhatsAppTransport


def make_transport(handler, token="token", phone_id="123") -> WhatsAppTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WhatsAppTransport(
        access_token=token,
        phone_number_id=phone_id,
        api_version="v19.0",
        client=client,
    )


class TestWhatsAppTransport:
    """Tests for Graph API sends."""

    @pytest.mark.asyncio
    async def test_send_posts_text_message(self):
        """Test the URL, auth header and body of a send."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"messages": [{"id": "wamid.1"}]})

        transport = make_transport(handler)

        assert await transport.send("15550001", "hello") is True
        assert seen["url"] == "https://graph.facebook.com/v19.0/123/messages"
        assert seen["auth"] == "Bearer token"
        assert seen["body"] == {
            "messaging_product": "whatsapp",
            "to": "15550001",
            "type": "text",
            "text": {"body": "hello"},
        }
        await transport.close()

    @pytest.mark.asyncio
    async def test_error_status_returns_false(self):
        """Test that a rejected send reports failure."""
        transport = make_transport(lambda request: httpx.Response(400, text="bad"))
        assert await transport.send("15550001", "hello") is False

    @pytest.mark.asyncio
    async def test_network_error_returns_false(self):
        """Test that connection errors are reported, not raised."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        transport = make_transport(handler)
        assert await transport.send("15550001", "hello") is False

    @pytest.mark.asyncio
    async def test_dry_run_when_unconfigured(self):
        """Test that without credentials nothing is posted."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        transport = make_transport(handler, token="", phone_id="")

        assert transport.enabled is False
        assert await transport.send("15550001", "hello") is True
        assert calls == []
