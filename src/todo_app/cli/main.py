# src/todo_app/cli/main.py

"""
CLI entrypoint.

    todo-app serve     run the HTTP API (Flask app on a werkzeug server)
    todo-app console   run the interactive console client against the API

Initializes logging first, then hands off to the chosen mode.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import threading

from werkzeug.serving import make_server

from ..cli.bootstrap import create_api_client, create_controller, create_server_app
from ..config import Settings, get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todo-app", description="Minimal task manager.")
    sub = parser.add_subparsers(dest="mode")

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=None, help="Override TODO_HOST.")
    serve.add_argument("--port", type=int, default=None, help="Override TODO_PORT.")

    sub.add_parser("console", help="Run the interactive console client.")
    return parser


def run_server(settings: Settings, *, host: str | None = None, port: int | None = None) -> None:
    host = host or settings.host
    port = port or settings.port

    app = create_server_app(settings=settings)
    server = make_server(host, port, app, threaded=False)

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError):
        # Not in the main thread, or the platform lacks SIGTERM.
        logger.debug("Signal handlers not installed.", exc_info=True)

    worker = threading.Thread(target=server.serve_forever, name="http-server", daemon=True)
    worker.start()

    logger.info("%s backend started", settings.app_name)
    logger.info("Server running at: http://%s:%s", host, port)
    logger.info("Health check: http://%s:%s/health", host, port)
    logger.info("API endpoints: http://%s:%s/api/tasks", host, port)
    logger.info("Environment: %s", settings.environment)

    try:
        stop_main.wait()
    finally:
        server.shutdown()
        worker.join(timeout=10.0)
        logger.info("Server closed.")


async def run_console(settings: Settings) -> None:
    api = create_api_client(settings=settings)
    controller = create_controller(api, settings=settings)
    try:
        await run_console_loop(controller, app_name=settings.app_name)
    finally:
        await api.aclose()


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    settings = get_settings()

    console_level = level_from_name(settings.log_level)
    mode = args.mode or "console"

    # The console REPL shares the terminal with logs; keep it to warnings there.
    if mode == "console":
        console_level = max(console_level, logging.WARNING)

    setup_logging(log_dir=settings.data_dir, log_name=f"todo-{mode}.log", console_level=console_level)

    logger.info("Starting %s (%s)...", settings.app_name, mode)

    if mode == "serve":
        run_server(settings, host=args.host, port=args.port)
    else:
        try:
            asyncio.run(run_console(settings))
        except KeyboardInterrupt:
            logger.info("Interrupted.")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
