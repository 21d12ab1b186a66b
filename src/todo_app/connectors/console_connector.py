# src/todo_app/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..client.controller import TaskController
from .console_view import render_view

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def _read_line(prompt: str) -> str:
    # input() blocks; keep it off the loop so health polling keeps running.
    return await asyncio.to_thread(input, prompt)


async def _confirm(question: str) -> bool:
    try:
        answer = await _read_line(f"{question} (y/N): ")
    except (EOFError, KeyboardInterrupt):
        return False
    return answer.strip().lower() in ("y", "yes")


async def run_console_loop(controller: TaskController, *, app_name: str = "TodoApp") -> None:
    """
    Interactive console: initial load, background health polling, then a REPL.

    Polling is stopped before returning.
    """
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    await controller.load_tasks()
    controller.start_health_polling()
    print(render_view(controller, app_name=app_name))

    try:
        while True:
            try:
                user_input = (await _read_line(">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            line = user_input if user_input.startswith("/") else f"/add {user_input}"

            try:
                response = await command_registry.handle(
                    controller, line, emit=emit, confirm=_confirm
                )
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                print(f"[{_ts_local()}] {response}")
    finally:
        await controller.stop()
        logger.info("Console connector finished.")
