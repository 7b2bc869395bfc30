from __future__ import annotations

import socket

from .settings import PackSettings


class DevServer:
    """Answers whether an asset dev server is accepting connections."""

    def __init__(self, host: str, port: int, connect_timeout: float = 0.01) -> None:
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout

    @classmethod
    def from_settings(cls, settings: PackSettings) -> "DevServer":
        return cls(
            settings.dev_server_host,
            settings.dev_server_port,
            settings.dev_server_connect_timeout,
        )

    def running(self) -> bool:
        if not self.host:
            return False
        try:
            with socket.create_connection((self.host, self.port), timeout=self.connect_timeout):
                return True
        except OSError:
            return False
