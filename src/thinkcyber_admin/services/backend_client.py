"""
Outbound client for the content backend.

Every call is made inside its own ``httpx.AsyncClient`` context with a
bounded timeout, and every failure (non-2xx response, transport error,
timeout) is folded into a ``ForwardResult`` instead of being raised. The
routers decide how a failure is surfaced to the caller.

Classes
-------
ForwardResult
    Normalized outcome of one backend call.
BackendClient
    Async forwarder for JSON and multipart requests.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from thinkcyber_admin import __version__

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 10.0
_UPLOAD_TIMEOUT_SECONDS = 300.0
_PASSTHROUGH_KEYS = ("message", "meta", "stats", "categories")


@dataclass
class ForwardResult:
    """
    Outcome of a single backend call.

    Attributes
    ----------
    success : bool
        True when the backend answered with a 2xx status.
    data : Any
        The body's ``data`` member, the body itself when it is a list, or
        None.
    error : Optional[str]
        Failure message; set only when ``success`` is False.
    message, meta, stats, categories
        Passed through from the backend body when present.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    meta: Optional[dict[str, Any]] = None
    stats: Optional[dict[str, Any]] = None
    categories: Any = None

    @classmethod
    def failure(cls, error: str) -> ForwardResult:
        return cls(success=False, error=error)


def _serialize_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def clean_params(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """
    Drop unset query values and stringify the rest.

    ``None`` and ``""`` are dropped; ``0`` and ``False`` are kept.
    """
    if not params:
        return {}
    return {
        key: _serialize_param(value)
        for key, value in params.items()
        if value is not None and value != ""
    }


class BackendClient:
    """
    Async forwarder for the content backend API.

    Parameters
    ----------
    base_url : str
        Backend root, e.g. ``http://localhost:8000/api``.
    token : Optional[str]
        Bearer token sent as ``Authorization`` when set.
    timeout : float
        Timeout in seconds for ordinary calls.
    upload_timeout : float
        Timeout in seconds for multipart uploads.
    transport : Optional[httpx.AsyncBaseTransport]
        Transport override; tests inject an ``httpx.MockTransport``.

    Examples
    --------
    >>> client = BackendClient("http://localhost:8000/api", token="abc")
    >>> result = await client.get("categories", params={"page": 1})
    >>> result.success
    True
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        upload_timeout: float = _UPLOAD_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token or None
        self.timeout = timeout
        self.upload_timeout = upload_timeout
        self._transport = transport

    def build_url(
        self, endpoint: str, params: Optional[Mapping[str, Any]] = None
    ) -> str:
        """
        Join an endpoint onto the base URL and append the query string.

        Parameters
        ----------
        endpoint : str
            Path relative to the base URL; leading slashes are ignored.
        params : Optional[Mapping[str, Any]]
            Query parameters; unset values are skipped.

        Returns
        -------
        str
            Absolute URL without a doubled slash at the join.
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        query = clean_params(params)
        if query:
            url = f"{url}?{urlencode(query)}"
        return url

    def _headers(self, multipart: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"thinkcyber-admin/{__version__}",
        }
        if not multipart:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        files: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> ForwardResult:
        """
        Send one request to the backend and normalize the outcome.

        Parameters
        ----------
        method : str
            HTTP method.
        endpoint : str
            Path relative to the base URL.
        params : Optional[Mapping[str, Any]]
            Query parameters.
        json : Any
            JSON body for ordinary calls.
        files : Optional[Mapping[str, Any]]
            Multipart file parts; switches to the upload timeout.
        data : Optional[Mapping[str, Any]]
            Multipart form fields sent alongside ``files``.

        Returns
        -------
        ForwardResult
            Never raises for backend, transport or timeout failures.
        """
        multipart = files is not None
        timeout = self.upload_timeout if multipart else self.timeout
        url = self.build_url(endpoint, params)

        logger.debug("Forwarding %s %s", method.upper(), url)

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=timeout
            ) as client:
                response = await client.request(
                    method.upper(),
                    url,
                    headers=self._headers(multipart),
                    json=json if not multipart else None,
                    files=files,
                    data=data if multipart else None,
                )
        except httpx.TimeoutException:
            message = f"Request timed out after {timeout:g}s"
            logger.warning("%s %s: %s", method.upper(), url, message)
            return ForwardResult.failure(message)
        except httpx.HTTPError as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning("%s %s failed: %s", method.upper(), url, message)
            return ForwardResult.failure(message)

        return self._interpret(method, url, response)

    def _interpret(
        self, method: str, url: str, response: httpx.Response
    ) -> ForwardResult:
        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None
                if response.is_success:
                    logger.warning(
                        "%s %s returned a non-JSON body", method.upper(), url
                    )
                    return ForwardResult.failure("Invalid JSON response from backend")

        if not response.is_success:
            error = None
            if isinstance(body, Mapping):
                error = body.get("error") or body.get("message")
            message = str(error) if error else f"HTTP Error: {response.status_code}"
            logger.warning(
                "%s %s -> %d: %s",
                method.upper(),
                url,
                response.status_code,
                message,
            )
            return ForwardResult.failure(message)

        if isinstance(body, Mapping):
            result = ForwardResult(success=True, data=body.get("data"))
            for key in _PASSTHROUGH_KEYS:
                setattr(result, key, body.get(key))
            return result
        if isinstance(body, list):
            return ForwardResult(success=True, data=body)
        return ForwardResult(success=True)

    # -------------------------------------------------------------------------
    # convenience wrappers
    # -------------------------------------------------------------------------

    async def get(
        self, endpoint: str, params: Optional[Mapping[str, Any]] = None
    ) -> ForwardResult:
        return await self.request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ForwardResult:
        return await self.request("POST", endpoint, json=json, params=params)

    async def put(self, endpoint: str, json: Any = None) -> ForwardResult:
        return await self.request("PUT", endpoint, json=json)

    async def patch(self, endpoint: str, json: Any = None) -> ForwardResult:
        return await self.request("PATCH", endpoint, json=json)

    async def delete(self, endpoint: str) -> ForwardResult:
        return await self.request("DELETE", endpoint)

    async def upload(
        self,
        endpoint: str,
        files: Mapping[str, Any],
        data: Optional[Mapping[str, Any]] = None,
    ) -> ForwardResult:
        """Send a multipart upload with the long timeout."""
        return await self.request("POST", endpoint, files=files, data=data)
