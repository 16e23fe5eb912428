"""
Command line runner.

Runs one transport module with the link on stdin/stdout, e.g. as the
``pty`` program of pppd::

    pppd noauth pty "python -m pppoat -m udp server=true"

SIGINT and SIGTERM are delivered to the module through its control
descriptor, so the module shuts down gracefully.
"""
import argparse
import asyncio
import logging
import os
import signal
import sys
from pathlib import Path
from typing import List, Optional

import pppoat.com.transport  # noqa: F401  registers the built-in modules
from pppoat.com.core.exceptions import CommunicationError
from pppoat.com.modules.module_registry import module_registry
from pppoat.com.modules.transport_module import AbstractTransportModule
from pppoat.helper.conf import Config
from pppoat.helper.logging_config import PppoatLoggingConfig

logger = logging.getLogger("pppoat.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pppoat",
        description="PPP over Any Transport: forward stdin/stdout over a transport module.",
    )
    parser.add_argument("-m", "--module", default="udp", help="transport module (default: udp)")
    parser.add_argument("-c", "--config", type=Path, help=".env file with PPPOAT_* options")
    parser.add_argument(
        "-l", "--log-level", type=str.upper, default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="log level (default: $PPPOAT_LOG_LEVEL or INFO)",
    )
    parser.add_argument("--log-file", type=Path, help="write logs to a rotating file as well")
    parser.add_argument("--json-logs", action="store_true", help="JSON formatted log file")
    parser.add_argument("--list-modules", action="store_true", help="list transport modules and exit")
    parser.add_argument("--version", action="store_true", help="print the version and exit")
    parser.add_argument("options", nargs="*", metavar="key=value", help="module options, e.g. server=true")
    return parser


def load_config(args: argparse.Namespace, environ: Optional[dict] = None) -> Config:
    """Environment, then the config file, then command line options."""
    conf = Config.from_environ(environ)
    if args.config is not None:
        conf = conf.merge(Config.from_env_file(args.config))
    return conf.merge(Config.from_args(args.options))


async def run_module(module: AbstractTransportModule, link_rd: int, link_wr: int) -> None:
    """Run *module* until it fails or a termination signal arrives."""
    loop = asyncio.get_running_loop()
    ctrl_rd, ctrl_wr = os.pipe()

    def _request_shutdown() -> None:
        logger.info("🛑 Termination signal received")
        os.write(ctrl_wr, b"\0")

    signals = (signal.SIGINT, signal.SIGTERM)
    for sig in signals:
        loop.add_signal_handler(sig, _request_shutdown)
    try:
        await module.run(link_rd, link_wr, ctrl_rd)
    finally:
        for sig in signals:
            loop.remove_signal_handler(sig)
        os.close(ctrl_rd)
        os.close(ctrl_wr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        from pppoat.__version__ import __version__
        print(__version__)
        return 0

    if args.list_modules:
        for module_cls in module_registry.list_modules():
            print(f"{module_cls.name:<10} {module_cls.description}")
        return 0

    PppoatLoggingConfig.initialize(
        log_level=args.log_level,
        log_file=args.log_file,
        enable_colors=sys.stderr.isatty(),
        enable_json=args.json_logs,
    )

    try:
        conf = load_config(args)
        module = module_registry.create(args.module)
        module.initialize(conf)
    except (CommunicationError, FileNotFoundError) as e:
        logger.error("❌ Initialization failed: %s", e, extra={"code": getattr(e, "code", None)})
        return 1

    try:
        asyncio.run(run_module(module, sys.stdin.fileno(), sys.stdout.fileno()))
    except CommunicationError as e:
        logger.error("❌ %s", e, extra={"code": e.code})
        return 1
    finally:
        module.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
