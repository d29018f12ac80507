"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from now_certs.core.certificate_service import CertificateService
from now_certs.core.models import (
    Certificate,
    CertificateBundle,
    InvocationContext,
    Team,
    User,
)
from now_certs.core.protocols import CertsClient

__all__: list[str] = [
    "Certificate",
    "CertificateBundle",
    "CertificateService",
    "CertsClient",
    "InvocationContext",
    "Team",
    "User",
]
