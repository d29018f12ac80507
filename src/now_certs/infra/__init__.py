"""Infrastructure layer — external system integration.

This layer wraps all interaction with the certificates HTTP API, the
config files on disk, and local certificate material.  Every raw
third-party exception must be caught here and re-raised as a
:class:`~now_certs.exceptions.NowCertsError` subclass; the one exception
is certificate-file ``OSError``, which the CLI boundary renders as-is.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from now_certs.infra.cert_files import load_bundle, read_x509_file
from now_certs.infra.config_loader import load_invocation_context
from now_certs.infra.now_client import NowCertsClient

__all__: list[str] = [
    "NowCertsClient",
    "load_bundle",
    "load_invocation_context",
    "read_x509_file",
]
