"""Connectivity signal.

Hides how "online" is determined. The flag can be driven externally
(``set_online``) or by probing the API host over TCP.
"""

import asyncio
from collections.abc import Callable

from loguru import logger

ConnectivityListener = Callable[[bool], None]


class ConnectivityMonitor:
    """Boolean online status with change notifications."""

    def __init__(
        self,
        online: bool = True,
        host: str = "api.openai.com",
        port: int = 443,
        timeout: float = 3.0,
    ) -> None:
        self._online = online
        self._host = host
        self._port = port
        self._timeout = timeout
        self._listeners: list[ConnectivityListener] = []

    @property
    def online(self) -> bool:
        return self._online

    @property
    def host(self) -> str:
        return self._host

    def set_online(self, online: bool) -> None:
        """Update the flag; listeners hear only about actual changes."""
        if online == self._online:
            return
        self._online = online
        logger.info("Connectivity changed: {}", "online" if online else "offline")
        for listener in list(self._listeners):
            listener(online)

    def subscribe(self, listener: ConnectivityListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def probe(self) -> bool:
        """Try a TCP connection to the API host and update the flag."""
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self._host, self._port),
                timeout=self._timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug("Connectivity probe to {}:{} failed: {}", self._host, self._port, e)
            self.set_online(False)
            return False

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        self.set_online(True)
        return True

    async def watch(self, interval: float = 10.0) -> None:
        """Probe every ``interval`` seconds until cancelled."""
        while True:
            await self.probe()
            await asyncio.sleep(interval)
