"""Redis command encoding and dispatch.

Encodes commands as RESP multibulk frames and sends them, singly or as
pipelines, to a connection actor with a reply deadline.
"""

from .client import DEFAULT_TIMEOUT, Client, connect, q, qp, start_link, start_link_from, stop
from .config import ConnectionConfig, RedisqSettings, parse_redistogo_uri
from .errors import (
    ActorNotRunning,
    CannotStoreFloats,
    ProtocolViolation,
    RedisqError,
    RequestTimeout,
    UnsupportedValue,
)
from .protocol.framing import create_multibulk
from .protocol.messages import NO_CONNECTION, Error, Ok
from .transport.actor import ConnectionActor
