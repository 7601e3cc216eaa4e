"""
Eligibility Service Clients Module

Adapters for the commerce platform and the partner file drop
"""

from .commerce_client import CommerceOrderClient
from .transport import SftpTransport, LocalDirectoryTransport

__all__ = [
    "CommerceOrderClient",
    "SftpTransport",
    "LocalDirectoryTransport",
]
