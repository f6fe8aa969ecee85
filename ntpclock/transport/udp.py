import select
import socket

from .base import Transport
from ntpclock.utils.exceptions import TransportError

_MAX_DATAGRAM = 65535


class UdpTransport(Transport):

    def __init__(self, bind_address: str = ""):
        self.bind_address = bind_address
        self.local_port = None
        self._sock = None

    def open(self, local_port: int) -> None:
        if self._sock is not None:
            return
        sock = None
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            sock.setblocking(False)
            sock.bind((self.bind_address, local_port))
        except OSError as e:
            if sock is not None:
                sock.close()
            raise TransportError(f"Failed to open UDP port {local_port}: {e}") from e
        self._sock = sock
        self.local_port = sock.getsockname()[1]

    def close(self) -> None:
        if self._sock:
            try:
                self._sock.close()
            except OSError:
                pass
            finally:
                self._sock = None

    def send_datagram(self, host: str, port: int, data: bytes) -> int:
        sock = self._require_socket()
        try:
            # Resolve per send: pool hostnames rotate between addresses.
            return sock.sendto(bytes(data), (host, port))
        except socket.gaierror as e:
            raise TransportError(f"Cannot resolve {host}: {e}") from e
        except OSError as e:
            raise TransportError(f"UDP send error: {e}") from e

    def available(self) -> int:
        sock = self._require_socket()
        try:
            readable, _, _ = select.select([sock], [], [], 0)
            if not readable:
                return 0
            size = len(sock.recv(_MAX_DATAGRAM, socket.MSG_PEEK))
            if size == 0:
                # An empty datagram would otherwise sit at the head of the queue
                sock.recv(1)
            return size
        except BlockingIOError:
            return 0
        except OSError as e:
            raise TransportError(f"UDP poll error: {e}") from e

    def discard_pending(self) -> int:
        sock = self._require_socket()
        dropped = 0
        while True:
            try:
                sock.recv(_MAX_DATAGRAM)
            except BlockingIOError:
                return dropped
            except OSError as e:
                raise TransportError(f"UDP read error: {e}") from e
            dropped += 1

    def read_datagram(self, max_len: int) -> bytes:
        sock = self._require_socket()
        try:
            data, _addr = sock.recvfrom(max(max_len, _MAX_DATAGRAM))
        except BlockingIOError:
            return b""
        except OSError as e:
            raise TransportError(f"UDP read error: {e}") from e
        return data[:max_len]

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("UDP transport is not open")
        return self._sock
