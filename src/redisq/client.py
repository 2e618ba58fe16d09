"""Command dispatch: encode commands and hand them to the connection actor.

Usage::

    client = start_link(connection_factory=my_factory)
    q(client, ["SET", "foo", "bar"])      # Ok(value=b'OK')
    q(client, ["GET", "foo"])             # Ok(value=b'bar')
    qp(client, [["INCR", "n"], ["GET", "n"]])
    stop(client)

Arguments may be any mix of ``str``, ``bytes``, ``int`` and enum members;
see :mod:`redisq.protocol.coercion`. Floats are refused with
:class:`~redisq.errors.CannotStoreFloats` before anything is sent.

A call that raises :class:`~redisq.errors.RequestTimeout` has only stopped
waiting. The command may still run on the server.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from .config import (
    DEFAULT_DATABASE,
    DEFAULT_PASSWORD,
    DEFAULT_RECONNECT_SLEEP_MS,
    ConnectionConfig,
    RedisqSettings,
    default_connect_info,
    resolve_config,
)
from .errors import ProtocolViolation
from .protocol.framing import create_multibulk
from .protocol.messages import Pipeline, Request, Result
from .transport.actor import ConnectionHandle

logger = logging.getLogger(__name__)

# Default deadline, in milliseconds, for a reply from the connection actor
DEFAULT_TIMEOUT = 5000

ConnectionFactory = Callable[[ConnectionConfig], ConnectionHandle]


class Client:
    """A connection actor together with the config it was started with."""

    def __init__(self, connection: ConnectionHandle, config: ConnectionConfig) -> None:
        self._connection = connection
        self._config = config

    @property
    def connection(self) -> ConnectionHandle:
        return self._connection

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def q(self, command: Sequence[Any], timeout_ms: int | None = DEFAULT_TIMEOUT) -> Result:
        return q(self, command, timeout_ms)

    def qp(
        self,
        pipeline: Iterable[Sequence[Any]],
        timeout_ms: int | None = DEFAULT_TIMEOUT,
    ) -> list[Result] | Result:
        return qp(self, pipeline, timeout_ms)

    def stop(self) -> None:
        stop(self)

    def __repr__(self) -> str:
        return f"Client(host={self._config.host!r}, port={self._config.port})"


def q(client: Client, command: Sequence[Any], timeout_ms: int | None = DEFAULT_TIMEOUT) -> Result:
    """Execute one command and return the actor's reply.

    Args:
        client: Client returned by :func:`start_link`.
        command: Redis verb followed by its arguments.
        timeout_ms: Reply deadline in milliseconds, ``None`` for no deadline.

    Returns:
        ``Ok(value)`` or ``Error(reason)``, exactly as the actor replied.

    Raises:
        UnsupportedValue: If an argument cannot be encoded. Nothing is sent.
        RequestTimeout: If the actor did not reply in time.
    """
    request = Request(create_multibulk(command))
    logger.debug("q %r", request)
    return client.connection.call(request, timeout_ms)


def qp(
    client: Client,
    pipeline: Iterable[Sequence[Any]],
    timeout_ms: int | None = DEFAULT_TIMEOUT,
) -> list[Result] | Result:
    """Execute a pipeline of commands in one round trip.

    An empty pipeline returns ``[]`` without contacting the actor.

    Returns:
        One result per command, in pipeline order, or a single
        ``Error(NO_CONNECTION)`` if the pipeline could not be sent.

    Raises:
        UnsupportedValue: If any argument of any command cannot be encoded.
            Nothing is sent.
        RequestTimeout: If the actor did not reply in time.
        ProtocolViolation: If the reply list does not line up with the
            pipeline.
    """
    frames = tuple(encode_pipeline(pipeline))
    if not frames:
        return []

    message = Pipeline(frames)
    logger.debug("qp %r", message)
    reply = client.connection.call(message, timeout_ms)

    if isinstance(reply, list) and len(reply) != len(message):
        raise ProtocolViolation(
            f"Pipeline of {len(message)} commands got {len(reply)} results"
        )
    return reply


def start_link(
    host: str | None = None,
    port: int | None = None,
    database: int = DEFAULT_DATABASE,
    password: str | None = None,
    reconnect_sleep: int = DEFAULT_RECONNECT_SLEEP_MS,
    *,
    connection_factory: ConnectionFactory,
    settings: RedisqSettings | None = None,
) -> Client:
    """Start a connection actor and return a client bound to it.

    ``start_link()`` takes host, port and password from ``REDISTOGO_URL``,
    falling back to ``127.0.0.1:6379`` without a password. Once a host and
    port are given explicitly, the environment is not consulted and the
    password defaults to ``""``.

    Args:
        connection_factory: Builds the connection actor for the resolved
            config. The returned handle is used as the message target.
        settings: Environment settings to use instead of reading them.
    """
    if host is None and port is None:
        info = default_connect_info(settings)
        host, port = info.host, info.port
        if password is None:
            password = info.password
    elif host is None or port is None:
        raise TypeError("host and port must be given together")

    config = ConnectionConfig(
        host=host,
        port=port,
        database=database,
        password=DEFAULT_PASSWORD if password is None else password,
        reconnect_sleep=reconnect_sleep,
    )
    return connect(config, connection_factory)


def start_link_from(
    options: Mapping[str, Any],
    *,
    connection_factory: ConnectionFactory,
    settings: RedisqSettings | None = None,
) -> Client:
    """Start a client from an option mapping, e.g. a pool worker's args.

    Missing ``host``, ``port`` and ``password`` come from the environment;
    missing ``database`` and ``reconnect_sleep`` use their defaults.
    """
    config = resolve_config(dict(options), settings)
    return connect(config, connection_factory)


def connect(config: ConnectionConfig, connection_factory: ConnectionFactory) -> Client:
    """Start a client from an already resolved config."""
    connection = connection_factory(config)
    logger.info(
        "Client started for %s:%d (database %d)",
        config.host,
        config.port,
        config.database,
    )
    return Client(connection, config)


def stop(client: Client) -> None:
    """Stop the client's connection actor, if it can be stopped."""
    stopper = getattr(client.connection, "stop", None)
    if stopper is not None:
        stopper()
    logger.info("Client for %s:%d stopped", client.config.host, client.config.port)


def encode_pipeline(pipeline: Iterable[Sequence[Any]]) -> list[bytes]:
    """Encode every command of a pipeline, preserving order."""
    return [create_multibulk(command) for command in pipeline]
