"""
resticle transports.

Transports perform the HTTP exchange for a ResourceRequest. The factory
only relies on the ResourceTransport protocol, so any client can be plugged
in.

Built-in Transports:
- HttpxTransport: asyncio HTTP via httpx.AsyncClient
- MockTransport: in-memory double for tests

Adding New Transports:
    class MyTransport(BaseTransport):
        async def request(self, req):
            ...  # perform req.method on req.path, return decoded body
"""

from .httpx_transport import HttpxTransport
from .protocol import BaseTransport, ResourceTransport
from .testing import MockTransport, PendingRequest

__all__ = [
    # Protocol
    "ResourceTransport",
    "BaseTransport",
    # Implementations
    "HttpxTransport",
    "MockTransport",
    "PendingRequest",
]
