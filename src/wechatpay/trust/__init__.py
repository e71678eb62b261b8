"""Trust management for platform certificates."""

from .refresh import CertificateRefresher
from .store import CertificateStore

__all__ = ["CertificateStore", "CertificateRefresher"]
