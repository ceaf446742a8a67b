"""Runtime dependency construction for each process role."""

from __future__ import annotations

import logging

from tunnel.link import BrokerLink
from tunnel.broker.router import RelayRouter
from tunnel.egress.worker import EgressWorker
from tunnel.protocol import Role, RegisterMessage
from tunnel.egress.executor import EgressExecutor
from tunnel.ingress.adapter import IngressAdapter
from tunnel.state import BrokerDeps, EgressDeps, IngressDeps
from tunnel.state.settings import BrokerSettings, EgressSettings, IngressSettings

from .settings_loader import load_broker_settings, load_egress_settings, load_ingress_settings

logger = logging.getLogger(__name__)


def build_broker_deps(settings: BrokerSettings | None = None) -> BrokerDeps:
    return BrokerDeps(router=RelayRouter(), settings=settings or load_broker_settings())


def build_ingress_deps(settings: IngressSettings | None = None) -> IngressDeps:
    settings = settings or load_ingress_settings()
    link = BrokerLink(settings.link, register=RegisterMessage(role=Role.INGRESS, client_id=settings.client_id))
    adapter = IngressAdapter(link, timeout_s=settings.request_timeout_s)
    link.set_handler(adapter.on_envelope)
    logger.info("ingress: relay %s, client id %s", settings.link.relay_url, settings.client_id)
    return IngressDeps(link=link, adapter=adapter, settings=settings)


def build_egress_deps(settings: EgressSettings | None = None) -> EgressDeps:
    settings = settings or load_egress_settings()
    link = BrokerLink(settings.link, register=RegisterMessage(role=Role.EGRESS))
    executor = EgressExecutor(target_url=settings.target_url, timeout_s=settings.target_timeout_s)
    worker = EgressWorker(link, executor)
    link.set_handler(worker.on_envelope)
    logger.info("egress: relay %s, target %s", settings.link.relay_url, settings.target_url)
    return EgressDeps(link=link, executor=executor, worker=worker, settings=settings)


__all__ = ["build_broker_deps", "build_egress_deps", "build_ingress_deps"]
