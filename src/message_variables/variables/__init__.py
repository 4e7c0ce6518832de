"""Message variable core: codec, resolver, store and mirror."""

from message_variables.variables.codec import (
    coerce_scalar,
    decode_for_indexed_read,
    encode_for_indexed_write,
    numeric_index,
)
from message_variables.variables.mirror import MirrorSynchronizer
from message_variables.variables.resolver import MessageResolver
from message_variables.variables.store import VariableStore

__all__ = [
    "MessageResolver",
    "MirrorSynchronizer",
    "VariableStore",
    "coerce_scalar",
    "decode_for_indexed_read",
    "encode_for_indexed_write",
    "numeric_index",
]
