"""Zhipu chat-completion API client."""

import json
import time
from http import HTTPStatus
from io import BytesIO
from typing import Final

import httpx
import structlog

from daily_digest.llm.errors import LlmApiError, LlmAuthError, LlmProcessingError


logger = structlog.get_logger()

_CHAT_ENDPOINT: Final[str] = "https://open.bigmodel.cn/api/paas/v4/chat/completions"

# Service error code reported when the account is rate limited
_RATE_LIMIT_ERROR_CODE: Final[str] = "1302"

# Error message fragment ("rate limit") the service uses for the same condition
_RATE_LIMIT_MESSAGE: Final[str] = "\u901f\u7387\u9650\u5236"

_MAX_TOKENS: Final[int] = 2048
_TEMPERATURE: Final[float] = 0.1


class ZhipuChatClient:
    """Client for the Zhipu chat-completion endpoint.

    Sends one request per call with a JSON-object response format and
    thinking disabled, so the answer lands in ``message.content``. Retries
    are the caller's responsibility.

    Attributes:
        model: Model identifier to use.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "glm-4.7-flash",
        timeout: float = 40.0,
        endpoint: str = _CHAT_ENDPOINT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Zhipu API key.
            model: Model identifier.
            timeout: Deadline for the whole request, in seconds.
            endpoint: Chat-completion endpoint URL.
            transport: Optional httpx transport (tests inject MockTransport).

        Raises:
            LlmAuthError: If no API key is given.
        """
        if not api_key:
            msg = "ZHIPU_API_KEY is not set"
            raise LlmAuthError(msg)
        self._api_key = api_key
        self.model = model
        self._timeout = timeout
        self._endpoint = endpoint
        self._transport = transport
        self._log = logger.bind(component="llm", subcomponent="client", model=model)

    def _build_request_body(
        self, prompt: str, system_instruction: str | None
    ) -> dict[str, object]:
        """Build the chat-completion request body."""
        messages: list[dict[str, str]] = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.model,
            "messages": messages,
            "thinking": {"type": "disabled"},
            "response_format": {"type": "json_object"},
            "max_tokens": _MAX_TOKENS,
            "do_sample": False,
            "temperature": _TEMPERATURE,
        }

    def generate_content(
        self,
        prompt: str,
        system_instruction: str | None = None,
    ) -> str:
        """Send one chat-completion request.

        The timeout is a deadline for the whole request, including the
        body download.

        Args:
            prompt: User prompt text.
            system_instruction: Optional system instruction.

        Returns:
            Generated text from the first choice.

        Raises:
            LlmApiError: On network errors, a passed deadline or a non-2xx
                status.
            LlmProcessingError: If the response carries no content.
        """
        deadline = time.monotonic() + self._timeout
        try:
            with (
                httpx.Client(timeout=self._timeout, transport=self._transport) as client,
                client.stream(
                    "POST",
                    self._endpoint,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                    json=self._build_request_body(prompt, system_instruction),
                ) as response,
            ):
                body = _read_body_before(response, deadline)
        except httpx.HTTPError as exc:
            msg = f"Chat completion request failed: {exc}"
            raise LlmApiError(msg) from exc

        if not response.is_success:
            rate_limited = _is_rate_limited(response.status_code, body)
            self._log.warning(
                "llm_http_error",
                status=response.status_code,
                rate_limited=rate_limited,
            )
            msg = (
                f"Chat completion returned HTTP {response.status_code}: "
                f"{body[:300].decode('utf-8', errors='replace')}"
            )
            raise LlmApiError(
                msg, status_code=response.status_code, rate_limited=rate_limited
            )

        return self._extract_text(body)

    @staticmethod
    def _extract_text(body: bytes) -> str:
        """Extract generated text from the API response body.

        Raises:
            LlmProcessingError: If the response is missing expected fields.
        """
        try:
            data = json.loads(body)
        except ValueError as exc:
            msg = "Chat completion response is not JSON"
            raise LlmProcessingError(msg) from exc

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            msg = "No choices in chat completion response"
            raise LlmProcessingError(msg)

        first = choices[0] or {}
        content = (first.get("message") or {}).get("content")
        if not content:
            msg = (
                "Empty content in chat completion response "
                f"(finish_reason={first.get('finish_reason')})"
            )
            raise LlmProcessingError(msg)
        return str(content)


def _read_body_before(response: httpx.Response, deadline: float) -> bytes:
    """Read a streamed body, giving up once ``deadline`` has passed.

    Raises:
        LlmApiError: If the deadline passes mid-download.
    """
    buffer = BytesIO()
    for chunk in response.iter_bytes():
        if time.monotonic() > deadline:
            msg = (
                "Chat completion exceeded its deadline after "
                f"{buffer.tell()} bytes"
            )
            raise LlmApiError(msg, status_code=response.status_code)
        buffer.write(chunk)
    return buffer.getvalue()


def _is_rate_limited(status_code: int, body: bytes) -> bool:
    """Detect the service's rate-limit signature.

    HTTP 429, error code 1302, or an error message naming the rate limit.
    """
    if status_code == HTTPStatus.TOO_MANY_REQUESTS:
        return True
    text = body.decode("utf-8", errors="replace")
    try:
        data = json.loads(text)
    except ValueError:
        return _RATE_LIMIT_ERROR_CODE in text or _RATE_LIMIT_MESSAGE in text
    error = data.get("error") if isinstance(data, dict) else None
    if not isinstance(error, dict):
        return False
    return str(error.get("code", "")) == _RATE_LIMIT_ERROR_CODE or (
        _RATE_LIMIT_MESSAGE in str(error.get("message", ""))
    )
