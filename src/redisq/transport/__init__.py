"""Connection actor mailbox."""

from .actor import ConnectionActor, ConnectionHandle
