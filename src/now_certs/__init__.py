"""now-certs — manage TLS certificates registered with a Now account.

A thin command-line layer over the remote certificates API with a
strict layered architecture.
"""

from now_certs.version import __version__

__all__: list[str] = ["__version__"]
