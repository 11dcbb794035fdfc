"""Background HTTP listener for the status application."""

import logging
import math
import socket
import threading
import time
from collections.abc import Callable

import uvicorn
from fastapi import FastAPI

from probewatch.checks.probes import split_address
from probewatch.exceptions import ListenerStartupError
from probewatch.lifecycle import LifecycleCoordinator

DEFAULT_LISTEN_ADDRESS = ":3000"
DEFAULT_SHUTDOWN_GRACE_PERIOD = 10.0

# uvicorn checks its exit flag on a 100ms tick; allow for that on shutdown.
_STOP_MARGIN = 1.0


def parse_listen_address(address: str) -> tuple[str, int]:
    """Parse ``host:port`` or ``:port``; an empty host listens everywhere.

    Raises:
        ValueError: If the address is malformed

    """
    if address.startswith(":"):
        address = f"0.0.0.0{address}"
    host, port = split_address(address)
    return host, port


class StatusServer:
    """Serves the status application on a background thread.

    The serve loop and a shutdown watcher run as two tasks registered with
    the lifecycle coordinator. Once the coordinator cancels, the watcher
    stops the listener: new connections are refused and in-flight requests
    get at most ``shutdown_grace_period`` seconds to complete.
    """

    def __init__(
        self,
        app: FastAPI,
        listen_address: str,
        coordinator: LifecycleCoordinator,
        logger: logging.Logger,
        shutdown_grace_period: float = DEFAULT_SHUTDOWN_GRACE_PERIOD,
        on_failure: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the status server.

        Args:
            app: Application to serve
            listen_address: Address in host:port or :port form
            coordinator: Coordinator owning cancellation and the join barrier
            logger: Logger instance for logging operations
            shutdown_grace_period: Hard limit in seconds for in-flight requests on
                shutdown, rounded up to whole seconds (at least one) as uvicorn
                expects
            on_failure: Called if the serve loop dies unexpectedly

        Raises:
            ValueError: If the listen address is malformed

        """
        self.app = app
        self.listen_address = listen_address
        self.host, self.port = parse_listen_address(listen_address)
        self.coordinator = coordinator
        self.logger = logger
        self.shutdown_grace_period = max(1, math.ceil(shutdown_grace_period))
        self.on_failure = on_failure

        self.server = uvicorn.Server(
            uvicorn.Config(
                app,
                log_config=None,
                timeout_graceful_shutdown=self.shutdown_grace_period,
                lifespan="off",
            ),
        )
        self.failed = False
        self._socket: socket.socket | None = None
        self._stopped = threading.Event()

    @property
    def shutdown_deadline(self) -> float:
        """Seconds after cancellation by which both tasks have finished."""
        return self.shutdown_grace_period + 2 * _STOP_MARGIN

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise
        return sock

    def start(self) -> None:
        """Bind the listening socket and start serving in the background.

        Raises:
            ListenerStartupError: If the socket cannot be bound

        """
        try:
            self._socket = self._bind()
        except OSError as e:
            error_msg = f"Cannot start web listener on {self.listen_address}: {e}"
            raise ListenerStartupError(error_msg, original_error=e) from e

        self.port = self._socket.getsockname()[1]
        self.coordinator.spawn(self._serve, name="status-server")
        self.coordinator.spawn(self._watch_shutdown, name="status-server-shutdown")

    def wait_started(self, timeout: float = 5.0) -> bool:
        """Block until the listener accepts connections or has stopped."""
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if self.server.started:
                return True
            if self._stopped.is_set():
                return False
            time.sleep(0.05)
        return False

    def _serve(self) -> None:
        self.logger.info(f"Start web listener on {self.host}:{self.port}")
        try:
            self.server.run(sockets=[self._socket])
        except (Exception, SystemExit):
            # uvicorn reports startup errors with sys.exit(1)
            self.logger.exception(f"Web listener on {self.listen_address} failed")
            self._fail()
        else:
            if not self.server.started and not self.coordinator.cancelled.is_set():
                self.logger.error(f"Web listener on {self.listen_address} stopped before serving")
                self._fail()
        finally:
            self._stopped.set()
            if self._socket is not None:
                self._socket.close()

    def _fail(self) -> None:
        self.failed = True
        if self.on_failure is not None:
            self.on_failure()

    def _watch_shutdown(self) -> None:
        self.coordinator.cancelled.wait()
        self.server.should_exit = True

        if self._stopped.wait(self.shutdown_grace_period + _STOP_MARGIN):
            self.logger.info(f"Web listener on {self.listen_address} has been stopped")
            return

        self.logger.error(
            f"Cannot shutdown web listener within {self.shutdown_grace_period}s, forcing exit",
        )
        self.server.force_exit = True
        self._stopped.wait(_STOP_MARGIN)
