"""Core certificate service — orchestrates listing, lookup and mutation.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~now_certs.core.protocols.CertsClient` injected at
construction time (dependency inversion), keeping the core free of any
HTTP imports.

Guarantees
----------
* Pure orchestration — no ``print()``, no filesystem access.
* Only :class:`~now_certs.exceptions.NowCertsError` subclasses escape.
* Every client call is attempted exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from now_certs.core.models import Certificate, CertificateBundle
from now_certs.core.protocols import CertsClient
from now_certs.exceptions import (
    ApiError,
    CertificateNotFoundError,
    DuplicateCertificateError,
    NowCertsError,
)

_T = TypeVar("_T")

logger = logging.getLogger(__name__)


class CertificateService:
    """Stateless service over a certificates API client.

    Parameters
    ----------
    client:
        Any object satisfying the :class:`CertsClient` protocol.
    """

    def __init__(self, client: CertsClient) -> None:
        self._client: CertsClient = client

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_certificates(self) -> list[Certificate]:
        """Fetch all certificates, sorted ascending by common name."""
        raw = self._call(self._client.ls)
        if not isinstance(raw, list):
            raise ApiError("Unexpected certificate list payload from the API.")
        certs: list[Certificate] = []
        for entry in raw:
            try:
                certs.append(self.parse_certificate(entry))
            except ApiError as exc:
                logger.debug("skipping certificate record: %s", exc)
        return sorted(certs, key=lambda cert: cert.cn)

    def find(self, id_or_cn: str, owner: str) -> Certificate:
        """Return the first certificate whose uid or cn equals *id_or_cn*.

        Raises
        ------
        CertificateNotFoundError
            If nothing in the current scope matches.
        """
        for cert in self.list_certificates():
            if id_or_cn in (cert.uid, cert.cn):
                return cert
        raise CertificateNotFoundError(
            f'No certificate found by id or cn "{id_or_cn}" under {owner}',
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_standard(self, cn: str) -> str:
        """Request an auto-issued certificate for *cn* and return its uid.

        Raises
        ------
        DuplicateCertificateError
            If the API reports the certificate is already issued.
        """
        raw = self._call(lambda: self._client.create(cn))
        return self._require_created(cn, raw)

    def create_custom(self, cn: str, bundle: CertificateBundle) -> str:
        """Register user-supplied PEM material as the certificate for *cn*."""
        raw = self._call(
            lambda: self._client.put(cn, bundle.crt, bundle.key, bundle.ca),
        )
        return self._require_created(cn, raw)

    def renew(self, cert: Certificate) -> None:
        self._call(lambda: self._client.renew(cert.cn))

    def replace(self, cert: Certificate, bundle: CertificateBundle) -> None:
        self._call(
            lambda: self._client.put(cert.cn, bundle.crt, bundle.key, bundle.ca),
        )

    def remove(self, cert: Certificate) -> None:
        self._call(lambda: self._client.delete(cert.cn))

    # ------------------------------------------------------------------
    # Client delegation (safe boundary)
    # ------------------------------------------------------------------

    @staticmethod
    def _call(operation: Callable[[], _T]) -> _T:
        """Run a client call and ensure only our exceptions escape."""
        try:
            return operation()
        except NowCertsError:
            raise
        except Exception as exc:
            raise ApiError(f"Unexpected API client error: {exc}") from exc

    def _require_created(self, cn: str, raw: object) -> str:
        if not raw:
            raise DuplicateCertificateError(
                f"Certificate for {cn} is already issued.",
                hint="Use `now-certs renew` to renew an existing certificate.",
            )
        uid = raw.get("uid") if isinstance(raw, dict) else None
        if not uid:
            raise ApiError("Certificate API response did not include a 'uid'.")
        return str(uid)

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @classmethod
    def parse_certificate(cls, raw: object) -> Certificate:
        """Convert one API record into a :class:`Certificate`.

        Only ``uid`` is required.  A missing ``cn`` becomes ``""`` and a
        missing or unreadable timestamp becomes ``None``.

        Raises
        ------
        ApiError
            If the record is not an object or has no ``uid``.
        """
        if not isinstance(raw, dict):
            raise ApiError("Malformed certificate record from the API.")
        uid = raw.get("uid")
        if not uid:
            raise ApiError("Certificate record is missing 'uid'.")
        cn = raw.get("cn")
        return Certificate(
            uid=str(uid),
            cn=str(cn) if cn else "",
            created=cls._parse_timestamp(raw.get("created")),
            expiration=cls._parse_timestamp(raw.get("expiration")),
            auto_renew=bool(raw.get("autoRenew", False)),
        )

    @staticmethod
    def _parse_timestamp(value: Any) -> datetime | None:
        """Accept ISO-8601 strings (``Z`` suffix allowed) or epoch millis."""
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            try:
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                logger.debug("unreadable timestamp %r", value)
                return None
        if not isinstance(value, str):
            return None
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("unreadable timestamp %r", value)
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
