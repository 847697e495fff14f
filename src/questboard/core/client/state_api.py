# ♥♥─── State Service Client ─────────────────────────────────────────────────────
"""Asynchronous HTTP client for the remote state document service."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any, Self, NoReturn

import httpx
from pydantic import BaseModel, ValidationError

from questboard.core.models import GameSnapshot
from questboard.custom_logger import log

from .api_models import ServiceErrorBody, StateServiceError


if TYPE_CHECKING:
    from questboard.config.app_config_model import RemoteSettings

# ─── Constants ─────────────────────────────────────────────────────────────────
CODE_NOT_FOUND = 404
CODE_SUCCESS_NO_MSG = 204
STATE_ENDPOINT = "api/state/{user_id}"


def _error_detail(response: httpx.Response) -> tuple[str, Any]:
    """Extract a readable message and the decoded body from a failed response."""
    detail = response.text[:200]
    try:
        body = response.json()
    except json.JSONDecodeError:
        return detail, response.text
    if isinstance(body, dict):
        try:
            parsed = ServiceErrorBody.model_validate(body)
            detail = parsed.message or parsed.error or detail
        except ValidationError:
            pass
    return detail, body


# ─── Base HTTP Client ─────────────────────────────────────────────────────────
class ServiceHTTPClient:
    """Shared httpx plumbing: lazy client, bearer auth and error translation.

    :param settings: Remote service settings, the application settings when None.
    :param transport: Optional httpx transport, used by tests to mock the server.
    """

    error_cls: type[StateServiceError] = StateServiceError

    def __init__(self, settings: RemoteSettings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> None:
        if settings is None:
            from questboard.config.app_config import app_config

            settings = app_config.remote
        self.base_api_url: str = settings.base_url if settings.base_url.endswith("/") else f"{settings.base_url}/"
        self.timeout_seconds: float = settings.timeout_seconds
        self.api_headers: dict[str, str] = {"Content-Type": "application/json", "Accept": "application/json"}
        if settings.api_token is not None:
            self.api_headers["Authorization"] = f"Bearer {settings.api_token.get_secret_value()}"
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        log.debug("{} ready for {}", type(self).__name__, self.base_api_url)

    @property
    def async_http_client(self) -> httpx.AsyncClient:
        """Provide the `httpx.AsyncClient` instance, creating it if necessary."""
        if self._client is None or self._client.is_closed:
            log.debug("Initializing new httpx.AsyncClient instance.")
            self._client = httpx.AsyncClient(
                headers=self.api_headers,
                base_url=self.base_api_url,
                timeout=httpx.Timeout(self.timeout_seconds),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close_client_session(self) -> None:
        """Close the underlying `httpx.AsyncClient` session if it's open."""
        if self._client and not self._client.is_closed:
            log.debug("Closing httpx.AsyncClient session.")
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object) -> None:
        await self.close_client_session()

    async def _execute_request(self, http_method: str, api_endpoint: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise :attr:`error_cls` on any transport or HTTP failure.

        :param http_method: The HTTP method (e.g., "GET", "PUT").
        :param api_endpoint: The endpoint path relative to the base URL.
        :param kwargs: Additional arguments for `httpx.AsyncClient.request()`.
        :returns: The successful response.
        """
        normalized_endpoint = api_endpoint.lstrip("/")
        start_time_mono = time.monotonic()
        try:
            response = await self.async_http_client.request(method=http_method.upper(), url=normalized_endpoint, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as http_err:
            self._handle_http_status_error(http_err, http_method, normalized_endpoint)
        except (httpx.RequestError, httpx.TimeoutException) as transport_err:
            self._handle_transport_error(transport_err, http_method, normalized_endpoint)

        log.debug("Success ({}) : {} {} in {:.3f}s", response.status_code, http_method.upper(), normalized_endpoint, time.monotonic() - start_time_mono)
        return response

    def _handle_http_status_error(self, http_err: httpx.HTTPStatusError, http_method: str, normalized_endpoint: str) -> NoReturn:
        status_code = http_err.response.status_code
        detail, body = _error_detail(http_err.response)
        log.warning("HTTPStatusError for {} {}: {} - {}", http_method.upper(), normalized_endpoint, status_code, detail)
        raise self.error_cls(
            message=f"Request failed with HTTP status {status_code}: {detail}",
            status_code=status_code,
            response_data=body,
        ) from http_err

    def _handle_transport_error(self, transport_err: Exception, http_method: str, normalized_endpoint: str) -> NoReturn:
        log.error("Transport/Timeout error for {} {}: {}", http_method.upper(), normalized_endpoint, transport_err)
        raise self.error_cls(
            message=f"Request transport error: {transport_err.__class__.__name__} - {transport_err}",
        ) from transport_err

    @staticmethod
    def _prepare_request_data(data: Any | None) -> Any | None:
        """Serialize pydantic models with their wire names."""
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json", by_alias=True, exclude_none=True)
        return data


# ─── State API ────────────────────────────────────────────────────────────────
class StateAPI(ServiceHTTPClient):
    """Remote persistence of whole :class:`GameSnapshot` documents."""

    async def load_state(self, user_id: str) -> GameSnapshot | None:
        """Fetch the stored document of ``user_id``.

        :returns: The snapshot, or None when the service has no document for the user.
        :raises StateServiceError: On transport failure, non-404 HTTP errors or an invalid body.
        """
        endpoint = STATE_ENDPOINT.format(user_id=user_id)
        try:
            response = await self._execute_request("GET", endpoint)
        except StateServiceError as e:
            if e.status_code == CODE_NOT_FOUND:
                log.info("No remote state for user {}", user_id)
                return None
            raise

        if response.status_code == CODE_SUCCESS_NO_MSG or not response.content:
            return None

        try:
            body = response.json()
        except json.JSONDecodeError as json_err:
            log.error("JSONDecodeError for GET {}: {}. Response text: {}", endpoint, json_err, response.text[:200])
            raise StateServiceError(
                message=f"Failed to decode state document: {json_err}",
                status_code=response.status_code,
                response_data=response.text,
            ) from json_err

        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]

        try:
            return GameSnapshot.from_api_dict(body)
        except ValidationError as model_val_err:
            log.error("State document for {} failed validation: {}", user_id, model_val_err.errors(include_input=False))
            raise StateServiceError(
                message=f"Failed to validate state document: {model_val_err}",
                status_code=response.status_code,
                response_data=body,
            ) from model_val_err

    async def save_state(self, user_id: str, snapshot: GameSnapshot) -> bool:
        """Replace the stored document of ``user_id``.

        :returns: True once the service accepted the document.
        :raises StateServiceError: If the write failed.
        """
        endpoint = STATE_ENDPOINT.format(user_id=user_id)
        await self._execute_request("PUT", endpoint, json=snapshot.to_api_dict())
        log.debug("Saved remote state for {}", user_id)
        return True
