from .base import Transport
from .udp import UdpTransport


def create_transport(bind_address: str = "") -> Transport:
    """Create a UDP transport for NTP exchanges.

    Args:
        bind_address: Local interface address to bind (default: all interfaces,
            accepts a 'udp:' prefix)

    Returns:
        UdpTransport instance (not yet opened)
    """
    # Strip "udp:" prefix if present
    address = bind_address
    if bind_address.startswith("udp:"):
        address = bind_address[4:]

    return UdpTransport(bind_address=address)


__all__ = [
    'Transport',
    'UdpTransport',
    'create_transport',
]
