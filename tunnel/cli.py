"""Command line entry point for the broker, ingress and egress processes."""

from __future__ import annotations

import asyncio
import argparse
from dataclasses import replace

import uvicorn

from tunnel.egress.main import run_egress
from tunnel.runtime.logging import configure_logging
from tunnel.broker.server import create_broker_app
from tunnel.ingress.server import create_ingress_app
from tunnel.runtime.settings_loader import (
    load_broker_settings,
    load_egress_settings,
    load_ingress_settings,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="relay-tunnel", description="HTTP tunnel through a WebSocket relay broker")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="role", required=True)

    broker = sub.add_parser("broker", help="Run the relay broker")
    broker.add_argument("--host", default=None)
    broker.add_argument("--port", type=int, default=None)

    ingress = sub.add_parser("ingress", help="Run the ingress HTTP proxy (client role)")
    ingress.add_argument("--host", default=None)
    ingress.add_argument("--port", type=int, default=None)
    ingress.add_argument("--relay-url", default=None)
    ingress.add_argument("--client-id", default=None)

    egress = sub.add_parser("egress", help="Run the egress executor (master role)")
    egress.add_argument("--relay-url", default=None)
    egress.add_argument("--target-url", default=None)
    return parser


def _overrides(args: argparse.Namespace, **names: str) -> dict:
    return {field: getattr(args, attr) for field, attr in names.items() if getattr(args, attr, None) is not None}


def _run_broker(args: argparse.Namespace) -> None:
    settings = replace(load_broker_settings(), **_overrides(args, host="host", port="port"))
    uvicorn.run(create_broker_app(settings), host=settings.host, port=settings.port, log_config=None)


def _run_ingress(args: argparse.Namespace) -> None:
    settings = load_ingress_settings()
    link = replace(settings.link, **_overrides(args, relay_url="relay_url"))
    settings = replace(settings, link=link, **_overrides(args, host="host", port="port", client_id="client_id"))
    uvicorn.run(create_ingress_app(settings), host=settings.host, port=settings.port, log_config=None)


def _run_egress(args: argparse.Namespace) -> None:
    settings = load_egress_settings()
    link = replace(settings.link, **_overrides(args, relay_url="relay_url"))
    settings = replace(settings, link=link, **_overrides(args, target_url="target_url"))
    asyncio.run(run_egress(settings))


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)
    runners = {"broker": _run_broker, "ingress": _run_ingress, "egress": _run_egress}
    runners[args.role](args)


if __name__ == "__main__":
    main()
