"""Core layer - protocol parsing, axis motion, transports"""

from .axis import Axis
from .router import CommandRouter
from .serial_transport import SerialTransport
from .transport import MockTransport

__all__ = ['Axis', 'CommandRouter', 'SerialTransport', 'MockTransport']
