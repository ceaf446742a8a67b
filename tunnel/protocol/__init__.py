from .codec import dump_envelope, envelope_to_dict
from .parser import parse_envelope
from .envelope import (
    Role,
    Query,
    Headers,
    Envelope,
    ErrorMessage,
    RequestMessage,
    RegisterMessage,
    ResponseMessage,
    RegisteredMessage,
)

__all__ = [
    "Envelope",
    "ErrorMessage",
    "Headers",
    "Query",
    "RegisterMessage",
    "RegisteredMessage",
    "RequestMessage",
    "ResponseMessage",
    "Role",
    "dump_envelope",
    "envelope_to_dict",
    "parse_envelope",
]
