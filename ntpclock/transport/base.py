from abc import ABC, abstractmethod


class Transport(ABC):
    @abstractmethod
    def open(self, local_port: int) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def send_datagram(self, host: str, port: int, data: bytes) -> int:
        pass

    @abstractmethod
    def available(self) -> int:
        """Size of the next pending datagram, 0 if none."""
        pass

    @abstractmethod
    def read_datagram(self, max_len: int) -> bytes:
        pass

    @abstractmethod
    def discard_pending(self) -> int:
        """Drop every queued datagram; returns how many were dropped."""
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        pass
