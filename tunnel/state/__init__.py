from .http import HttpRequest, HttpResponse
from .runtime import BrokerDeps, EgressDeps, IngressDeps
from .settings import LinkSettings, BrokerSettings, EgressSettings, IngressSettings

__all__ = [
    "BrokerDeps",
    "BrokerSettings",
    "EgressDeps",
    "EgressSettings",
    "HttpRequest",
    "HttpResponse",
    "IngressDeps",
    "IngressSettings",
    "LinkSettings",
]
