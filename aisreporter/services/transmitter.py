"""UDP transmitter: one shared non-blocking socket, fire-and-forget datagrams."""
import logging
import socket
from typing import Optional

from aisreporter.core.errors import TransportError

logger = logging.getLogger("ais.udp")


class UdpTransmitter:
    def __init__(self):
        self._socket: Optional[socket.socket] = None
        self._errors = 0

    def open(self) -> None:
        if self._socket is None:
            self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            self._socket.setblocking(False)

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def send(self, data: bytes, address: str, port: int) -> int:
        """Send one datagram. Returns bytes handed to the OS, 0 if the send failed."""
        if self._socket is None:
            raise TransportError("UDP socket is not open")
        try:
            return self._socket.sendto(data, (address, port))
        except OSError as exc:
            self._errors += 1
            logger.warning("send failure to %s:%d (%s)", address, port, exc)
            return 0

    @property
    def errors(self) -> int:
        return self._errors

    @property
    def is_open(self) -> bool:
        return self._socket is not None
