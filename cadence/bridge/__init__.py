"""
Cadence Bridge Module

Transports to the media server and channels to the host process.
"""

from cadence.bridge.core import Bridge, TRANSPORT_HTTP, TRANSPORT_WS
from cadence.bridge.http import HttpResponse, HttpTransport
from cadence.bridge.stream import StreamTransport

__all__ = [
    "Bridge",
    "TRANSPORT_HTTP",
    "TRANSPORT_WS",
    "HttpResponse",
    "HttpTransport",
    "StreamTransport",
]
