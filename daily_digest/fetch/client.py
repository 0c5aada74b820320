"""HTTP client with bounded time, bounded size and failure isolation."""

import time
from io import BytesIO
from urllib.parse import urlparse

import httpx
import structlog

from daily_digest.fetch.config import FetchConfig
from daily_digest.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)
from daily_digest.fetch.models import (
    DeadlineExceededError,
    FetchError,
    FetchErrorClass,
    FetchResult,
    ResponseSizeExceededError,
)


logger = structlog.get_logger()


class HttpFetcher:
    """HTTP GET client that never raises.

    Every failure (timeout, connection error, oversize body, error status)
    is returned as a FetchResult carrying a FetchError. The timeout is a
    deadline for the whole request, including the body download.

    A single instance is safe to share across extraction workers: each
    request opens its own ``httpx.Client``.
    """

    def __init__(
        self,
        config: FetchConfig,
        run_id: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP fetcher.

        Args:
            config: Fetch configuration.
            run_id: Unique run identifier for logging.
            transport: Optional httpx transport (tests inject MockTransport).
        """
        self._config = config
        self._run_id = run_id
        self._transport = transport
        self._log = logger.bind(component="fetch", run_id=run_id)

    @property
    def config(self) -> FetchConfig:
        """Fetch configuration in use."""
        return self._config

    def fetch(
        self,
        url: str,
        timeout: float | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> FetchResult:
        """Fetch a URL.

        Args:
            url: The URL to fetch.
            timeout: Deadline in seconds (defaults to the page timeout).
            extra_headers: Additional headers to include.

        Returns:
            FetchResult with status and body, or error information.
        """
        start_time_ns = time.perf_counter_ns()
        timeout = timeout or self._config.page_timeout_seconds
        log = self._log.bind(url=url, domain=urlparse(url).netloc)

        headers: dict[str, str] = {
            "User-Agent": self._config.user_agent,
            "Accept": "*/*",
        }
        if extra_headers:
            headers.update(extra_headers)

        result = self._execute(url, headers, timeout)

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        log.info(
            "fetch_complete",
            status_code=result.status_code,
            bytes=result.body_size,
            duration_ms=round(duration_ms, 2),
            error_class=result.error.error_class.value if result.error else None,
        )
        return result

    def _execute(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float,
    ) -> FetchResult:
        """Execute a single streamed GET request.

        Args:
            url: URL to fetch.
            headers: Request headers.
            timeout: Deadline in seconds.

        Returns:
            FetchResult from the request.
        """
        deadline = time.monotonic() + timeout
        try:
            with (
                httpx.Client(
                    timeout=timeout,
                    follow_redirects=True,
                    transport=self._transport,
                ) as client,
                client.stream("GET", url, headers=headers) as response,
            ):
                content_length = response.headers.get("content-length")
                if (
                    content_length
                    and content_length.isdigit()
                    and int(content_length) > self._config.max_response_size_bytes
                ):
                    return self._failure(
                        url,
                        FetchErrorClass.RESPONSE_SIZE_EXCEEDED,
                        f"Response size {content_length} exceeds limit "
                        f"{self._config.max_response_size_bytes}",
                        status_code=response.status_code,
                    )

                body = self._read_body_with_limit(response, deadline)
                return FetchResult(
                    status_code=response.status_code,
                    final_url=str(response.url),
                    headers=dict(response.headers),
                    body_bytes=body,
                    error=self._classify_http_error(response.status_code),
                )

        except (httpx.TimeoutException, DeadlineExceededError) as e:
            return self._failure(
                url, FetchErrorClass.NETWORK_TIMEOUT, f"Request timed out: {e}"
            )

        except ResponseSizeExceededError as e:
            return self._failure(url, FetchErrorClass.RESPONSE_SIZE_EXCEEDED, str(e))

        except httpx.ConnectError as e:
            return self._failure(
                url, FetchErrorClass.CONNECTION_ERROR, f"Connection failed: {e}"
            )

        except Exception as e:  # noqa: BLE001
            return self._failure(
                url, FetchErrorClass.UNKNOWN, f"Unexpected error: {e}"
            )

    def _read_body_with_limit(
        self, response: httpx.Response, deadline: float
    ) -> bytes:
        """Read a streamed body with size and deadline limits.

        Args:
            response: Streamed HTTP response.
            deadline: ``time.monotonic()`` value after which reading stops.

        Returns:
            Response body bytes.

        Raises:
            ResponseSizeExceededError: If the size limit is exceeded.
            DeadlineExceededError: If the deadline passes mid-download.
        """
        buffer = BytesIO()
        total_read = 0
        max_size = self._config.max_response_size_bytes

        for chunk in response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            total_read += len(chunk)
            if total_read > max_size:
                msg = (
                    f"Response size exceeded limit of {max_size} bytes "
                    f"(read {total_read} bytes)"
                )
                raise ResponseSizeExceededError(msg)
            if time.monotonic() > deadline:
                msg = f"body download exceeded deadline after {total_read} bytes"
                raise DeadlineExceededError(msg)
            buffer.write(chunk)

        return buffer.getvalue()

    def _classify_http_error(self, status_code: int) -> FetchError | None:
        """Map a non-2xx status to a FetchError (None for success)."""
        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return None

        if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
            error_class, label = FetchErrorClass.RATE_LIMITED, "Rate limited"
        elif HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
            error_class, label = FetchErrorClass.HTTP_4XX, "Client error"
        elif HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
            error_class, label = FetchErrorClass.HTTP_5XX, "Server error"
        else:
            error_class, label = FetchErrorClass.UNKNOWN, "Unexpected status"

        return FetchError(
            error_class=error_class,
            message=f"{label} ({status_code})",
            status_code=status_code,
        )

    def _failure(
        self,
        url: str,
        error_class: FetchErrorClass,
        message: str,
        status_code: int | None = None,
    ) -> FetchResult:
        """Build a failed FetchResult."""
        return FetchResult(
            status_code=status_code or 0,
            final_url=url,
            error=FetchError(
                error_class=error_class,
                message=message,
                status_code=status_code,
            ),
        )
