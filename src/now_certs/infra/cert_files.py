"""Infrastructure: reading PEM certificate material from disk.

Paths are resolved against the current working directory.  Read errors
(missing file, permission denied, bad encoding) are not caught here;
they surface through the CLI error boundary unchanged.
"""

from __future__ import annotations

from pathlib import Path

from now_certs.core.models import CertificateBundle


def read_x509_file(path: str) -> str:
    """Return the UTF-8 text of the certificate file at *path*."""
    return Path(path).resolve().read_text(encoding="utf-8")


def load_bundle(crt: str, key: str, ca: str | None = None) -> CertificateBundle:
    """Read certificate, key and optional CA chain into a bundle."""
    return CertificateBundle(
        crt=read_x509_file(crt),
        key=read_x509_file(key),
        ca=read_x509_file(ca) if ca else "",
    )
