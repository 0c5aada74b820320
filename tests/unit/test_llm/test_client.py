"""Unit tests for the Zhipu chat-completion client."""

import json
import time
from collections.abc import Callable, Iterator

import httpx
import pytest

from daily_digest.llm.client import ZhipuChatClient
from daily_digest.llm.errors import LlmApiError, LlmAuthError, LlmProcessingError


Handler = Callable[[httpx.Request], httpx.Response]


def ok_payload(content: str) -> dict[str, object]:
    """Build a successful chat-completion payload."""
    return {
        "choices": [
            {"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ]
    }


def respond(status_code: int, payload: object) -> Handler:
    """Handler answering every request with one JSON response."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return handler


def make_client(handler: Handler, **kwargs: object) -> ZhipuChatClient:
    """Create a client whose requests go to ``handler``."""
    return ZhipuChatClient(
        api_key=str(kwargs.pop("api_key", "key")),
        transport=httpx.MockTransport(handler),
        **kwargs,  # type: ignore[arg-type]
    )


class TestInit:
    """Tests for client construction."""

    def test_missing_key_raises(self) -> None:
        """A client needs an API key."""
        with pytest.raises(LlmAuthError):
            ZhipuChatClient(api_key="")


class TestGenerateContent:
    """Tests for ZhipuChatClient.generate_content."""

    def test_success_returns_content(self) -> None:
        """The first choice's content is returned."""
        client = make_client(respond(200, ok_payload('{"overview": []}')))

        assert client.generate_content("prompt") == '{"overview": []}'

    def test_request_body(self) -> None:
        """The request asks for JSON output with thinking disabled."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=ok_payload("{}"))

        client = make_client(handler, api_key="secret", model="glm-test")
        client.generate_content("user prompt", system_instruction="system text")

        request = requests[0]
        body = json.loads(request.content)
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer secret"
        assert body["model"] == "glm-test"
        assert body["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user prompt"},
        ]
        assert body["thinking"] == {"type": "disabled"}
        assert body["response_format"] == {"type": "json_object"}
        assert body["do_sample"] is False

    def test_429_is_rate_limited(self) -> None:
        """HTTP 429 is flagged as a rate limit."""
        client = make_client(respond(429, {"error": {"code": "1301"}}))

        with pytest.raises(LlmApiError) as exc_info:
            client.generate_content("p")

        assert exc_info.value.rate_limited
        assert exc_info.value.status_code == 429

    def test_error_code_1302_is_rate_limited(self) -> None:
        """The service's rate-limit code is recognized on other statuses."""
        client = make_client(
            respond(400, {"error": {"code": "1302", "message": "too many requests"}})
        )

        with pytest.raises(LlmApiError) as exc_info:
            client.generate_content("p")

        assert exc_info.value.rate_limited

    def test_rate_limit_message_is_rate_limited(self) -> None:
        """An error message naming the rate limit is recognized too."""
        client = make_client(
            respond(400, {"error": {"code": "1305", "message": "触发速率限制"}})
        )

        with pytest.raises(LlmApiError) as exc_info:
            client.generate_content("p")

        assert exc_info.value.rate_limited

    def test_server_error_not_rate_limited(self) -> None:
        """Other failures are plain API errors."""
        client = make_client(respond(500, {"error": {"code": "500"}}))

        with pytest.raises(LlmApiError) as exc_info:
            client.generate_content("p")

        assert not exc_info.value.rate_limited
        assert exc_info.value.status_code == 500

    def test_network_error_wrapped(self) -> None:
        """Transport errors become LlmApiError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(LlmApiError):
            make_client(handler).generate_content("p")

    def test_slow_body_stops_at_deadline(self) -> None:
        """A body that trickles in past the timeout fails near the deadline."""

        def trickle() -> Iterator[bytes]:
            for _ in range(40):
                time.sleep(0.05)
                yield b" "

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=trickle())

        client = make_client(handler, timeout=0.2)

        start = time.monotonic()
        with pytest.raises(LlmApiError) as exc_info:
            client.generate_content("p")
        elapsed = time.monotonic() - start

        assert elapsed < 1.0
        assert not exc_info.value.rate_limited
        assert "deadline" in str(exc_info.value)

    def test_non_json_body_raises(self) -> None:
        """A 2xx body that is not JSON is a processing error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>gateway</html>")

        with pytest.raises(LlmProcessingError):
            make_client(handler).generate_content("p")

    def test_empty_content_raises(self) -> None:
        """A response without content is a processing error."""
        with pytest.raises(LlmProcessingError):
            make_client(respond(200, ok_payload(""))).generate_content("p")

    def test_no_choices_raises(self) -> None:
        """A response without choices is a processing error."""
        with pytest.raises(LlmProcessingError):
            make_client(respond(200, {"choices": []})).generate_content("p")
