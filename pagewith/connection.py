"""HTTP listener lifecycle.

The socket is bound here, before uvicorn starts, so bind failures surface as
:class:`BindError` and the real port of an ephemeral bind is known up front.
"""

import asyncio
import logging
import socket
from dataclasses import dataclass
from typing import Optional

import uvicorn
from fastapi import FastAPI

from pagewith.exceptions import BindError, NotRunningError

logger = logging.getLogger(__name__)

STARTUP_POLL_INTERVAL = 0.01
GRACEFUL_SHUTDOWN_TIMEOUT = 5


@dataclass(frozen=True)
class ConnectionInfo:
    """Address the preview server is reachable at."""

    host: str
    port: int
    url: str


def _format_url(host: str, port: int) -> str:
    if ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{port}"


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind a listening TCP socket, preferring IPv4 addresses.

    Raises:
        BindError: If the host does not resolve or the address is taken.
    """
    try:
        candidates = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except OSError as e:
        raise BindError(host, port, str(e)) from e

    candidates.sort(key=lambda info: info[0] != socket.AF_INET)
    family, socktype, proto, _, sockaddr = candidates[0]

    sock = socket.socket(family, socktype, proto)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(sockaddr)
        sock.listen(2048)
    except OSError as e:
        sock.close()
        raise BindError(host, port, str(e)) from e

    sock.set_inheritable(True)
    return sock


class Connection:
    """Owns the uvicorn server serving an app.

    Attributes:
        app: Application being served.
        info: Address of the running listener, None while not running.
    """

    def __init__(self, app: FastAPI, debug: bool = False) -> None:
        self.app = app
        self.debug = debug
        self.info: Optional[ConnectionInfo] = None
        self._server: Optional[uvicorn.Server] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def listen(self, port: int = 0, host: str = "localhost") -> ConnectionInfo:
        """Start serving.

        Args:
            port: Port to bind, 0 for an ephemeral one.
            host: Host to bind.

        Returns:
            Connection info of the bound listener.

        Raises:
            BindError: If the listener could not be established.
        """
        if self._task is not None:
            raise BindError(host, port, "server is already listening")

        logger.debug("establishing server connection...")
        sock = bind_socket(host, port)
        address, bound_port = sock.getsockname()[:2]

        config = uvicorn.Config(
            self.app,
            log_config=None,
            log_level="debug" if self.debug else "warning",
            access_log=self.debug,
            lifespan="off",
            timeout_graceful_shutdown=GRACEFUL_SHUTDOWN_TIMEOUT,
        )
        server = uvicorn.Server(config)
        task = asyncio.create_task(server.serve(sockets=[sock]))

        while not server.started:
            if task.done():
                sock.close()
                error = task.exception() if not task.cancelled() else None
                raise BindError(host, port, str(error or "server stopped during startup"))
            await asyncio.sleep(STARTUP_POLL_INTERVAL)

        self._server = server
        self._task = task
        self.info = ConnectionInfo(host=address, port=bound_port, url=_format_url(address, bound_port))
        logger.info("preview server established at %s", self.info.url)
        return self.info

    async def close(self) -> None:
        """Gracefully stop serving.

        Raises:
            NotRunningError: If the server never started or was closed.
        """
        logger.debug("closing the server...")
        if self._task is None or self._server is None:
            raise NotRunningError()

        self._server.should_exit = True
        try:
            await self._task
        finally:
            self._reset()
        logger.debug("successfully closed the server!")

    async def wait_closed(self) -> None:
        """Block until the server stops on its own (e.g. on SIGINT)."""
        if self._task is None:
            raise NotRunningError("Failed to wait for a server: server is not running.")
        try:
            await self._task
        finally:
            self._reset()

    def _reset(self) -> None:
        self._server = None
        self._task = None
        self.info = None
