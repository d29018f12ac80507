"""httpx backed implementation of :class:`~now_certs.core.protocols.CertsClient`.

This module is the **only** place in the codebase that imports ``httpx``.
All transport and HTTP-status failures are caught here and re-raised as
typed :class:`~now_certs.exceptions.NowCertsError` subclasses — nothing
raw escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from now_certs.core.models import Team
from now_certs.exceptions import ApiError, AuthenticationError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.zeit.co"
CERTS_PATH = "/v3/now/certs"


class NowCertsClient:
    """Concrete :class:`CertsClient` for the Now certificates endpoint.

    Usage::

        with NowCertsClient(api_url, token, team=team) as client:
            records = client.ls()

    This class satisfies the :class:`~now_certs.core.protocols.CertsClient`
    protocol structurally — no explicit inheritance required.  Every call
    is attempted exactly once.
    """

    def __init__(
        self,
        api_url: str,
        token: str,
        *,
        team: Team | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._http = httpx.Client(
            base_url=api_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
        )
        self._params = self._scope_params(team)

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> NowCertsClient:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def ls(self) -> list[dict[str, Any]]:
        body = self._request("GET", CERTS_PATH)
        certs = body.get("certs") if isinstance(body, dict) else None
        if not isinstance(certs, list):
            raise ApiError("Certificate list response did not contain 'certs'.")
        return certs

    def create(self, cn: str) -> dict[str, Any] | None:
        """Request a standard certificate; ``None`` means already issued."""
        response = self._send("POST", CERTS_PATH, json={"domains": [cn]})
        if response.status_code == httpx.codes.NOT_MODIFIED:
            logger.debug("certificate for %s already issued", cn)
            return None
        return self._json(response)

    def put(self, cn: str, crt: str, key: str, ca: str) -> dict[str, Any] | None:
        return self._request(
            "PUT",
            CERTS_PATH,
            json={"domains": [cn], "ca": ca, "cert": crt, "key": key},
        )

    def renew(self, cn: str) -> None:
        self._request("POST", CERTS_PATH, json={"domains": [cn], "renew": True})

    def delete(self, cn: str) -> None:
        self._request("DELETE", f"{CERTS_PATH}/{quote(cn, safe='')}")

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    @staticmethod
    def _scope_params(team: Team | None) -> dict[str, str]:
        if team is None:
            return {}
        if team.id:
            return {"teamId": team.id}
        return {"slug": team.slug}

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> Any:
        return self._json(self._send(method, path, json=json))

    def _send(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Perform one request and map failures to our hierarchy."""
        try:
            response = self._http.request(method, path, params=self._params, json=json)
        except httpx.TimeoutException as exc:
            raise ApiError(
                f"Request to {path} timed out.",
                hint="Check your network connection and try again.",
            ) from exc
        except httpx.HTTPError as exc:
            raise ApiError(
                f"Could not reach the certificates API: {exc}",
                hint="Check your network connection and try again.",
            ) from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            raise AuthenticationError(
                self._error_message(response, "Authentication failed."),
                hint="Your token may be invalid or expired. Run `now login`.",
                status_code=response.status_code,
            )
        if response.is_error:
            raise ApiError(
                self._error_message(
                    response,
                    f"Certificates API returned HTTP {response.status_code}.",
                ),
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                "Certificates API returned a non-JSON response.",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        """Prefer the server's ``error.message`` over a generic fallback."""
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return fallback
