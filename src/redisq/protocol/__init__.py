"""Protocol layer: argument coercion, multibulk framing, and actor messages."""

from .coercion import ArgKind, classify, to_binary
from .framing import create_multibulk, parse_multibulk
from .messages import NO_CONNECTION, Error, Ok, Pipeline, Request
