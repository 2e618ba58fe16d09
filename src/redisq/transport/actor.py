"""Connection actor mailbox.

A :class:`ConnectionActor` owns a single worker thread that takes
messages off a queue and hands them, one at a time and in arrival order,
to a handler. The handler is where the real connection lives (socket I/O,
reconnects, reply decoding); this module only provides the mailbox and
the blocking call with a deadline.

Usage::

    actor = ConnectionActor(handler)
    actor.start()
    reply = actor.call(Request(frame), timeout_ms=5000)
    actor.stop()

A call that times out is not withdrawn from the mailbox. The handler
still runs it and the reply is dropped.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from concurrent import futures
from typing import Any, Protocol

from ..errors import ActorNotRunning, RequestTimeout

logger = logging.getLogger(__name__)

STOP_TIMEOUT_MS = 5000

_STOP = object()

Handler = Callable[[Any], Any]


class ConnectionHandle(Protocol):
    """Anything the dispatch layer can address a message to."""

    def call(self, message: Any, timeout_ms: int | None) -> Any: ...


class ConnectionActor:
    """Thread-backed mailbox in front of a connection handler."""

    def __init__(self, handler: Handler, name: str = "redisq-connection") -> None:
        self._handler = handler
        self._name = name
        self._mailbox: queue.Queue = queue.Queue()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> ConnectionActor:
        """Start the worker thread. Starting a running actor is a no-op."""
        with self._lock:
            if self._running:
                return self
            self._thread = threading.Thread(
                target=self._loop, name=self._name, daemon=True
            )
            self._running = True
            self._thread.start()
        logger.info("Connection actor %s started", self._name)
        return self

    def stop(self, timeout_ms: int = STOP_TIMEOUT_MS) -> None:
        """Stop the worker once it has served the messages already queued.

        Messages that arrive after ``stop`` fail with
        :class:`ActorNotRunning`.
        """
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._mailbox.put(_STOP)
            thread = self._thread
            self._thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout_ms / 1000)
            if thread.is_alive():
                logger.warning(
                    "Connection actor %s did not stop within %d ms",
                    self._name,
                    timeout_ms,
                )
        logger.info("Connection actor %s stopped", self._name)

    def call(self, message: Any, timeout_ms: int | None) -> Any:
        """Send ``message`` and block until the handler replies.

        Args:
            message: Message passed to the handler as-is.
            timeout_ms: Deadline for the reply, or ``None`` to wait
                indefinitely.

        Raises:
            RequestTimeout: If no reply arrived within ``timeout_ms``.
            ActorNotRunning: If the actor is stopped.
            Exception: Whatever the handler raised for this message.
        """
        future: futures.Future = futures.Future()
        with self._lock:
            if not self._running:
                raise ActorNotRunning(f"Connection actor {self._name} is not running")
            self._mailbox.put((message, future))

        timeout = None if timeout_ms is None else timeout_ms / 1000
        try:
            return future.result(timeout=timeout)
        except futures.TimeoutError:
            logger.debug("Gave up on %r after %s ms", message, timeout_ms)
            raise RequestTimeout(message, timeout_ms) from None

    def _loop(self) -> None:
        while True:
            item = self._mailbox.get()
            if item is _STOP:
                break
            message, future = item
            try:
                reply = self._handler(message)
            except Exception as e:
                logger.warning("Handler failed for %r: %s", message, e)
                future.set_exception(e)
            else:
                future.set_result(reply)
        self._drain()

    def _drain(self) -> None:
        while True:
            try:
                item = self._mailbox.get_nowait()
            except queue.Empty:
                return
            if item is _STOP:
                continue
            _, future = item
            future.set_exception(
                ActorNotRunning(f"Connection actor {self._name} stopped")
            )
