from dioxide.transport.base import Transport, TransportEvent, now_millis
from dioxide.transport.http import HttpTransport

__all__ = ["Transport", "TransportEvent", "HttpTransport", "now_millis"]
