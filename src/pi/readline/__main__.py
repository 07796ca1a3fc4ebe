"""Interactive demo: an echo REPL that continues unbalanced brackets.

Run with ``python -m pi.readline``. Ctrl-C cancels the current line,
Ctrl-D or ``exit`` quits.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from pi.readline.config import ReadlineConfig
from pi.readline.errors import ReadAbortedError
from pi.readline.highlight import bracket_highlighter
from pi.readline.keymap import Input, InputType
from pi.readline.readline import Readline
from pi.readline.terminal import ProcessTerminal


def is_balanced(text: str) -> bool:
    """``True`` unless *text* has more opening than closing brackets."""
    depth = 0
    for ch in text:
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
    return depth <= 0


async def repl(rl: Readline, prompt: str) -> None:
    quit_requested = False

    def on_default(item: Input) -> None:
        nonlocal quit_requested
        if item.input_type is InputType.CTRL_D:
            quit_requested = True
            rl.abort_active_read()
        elif item.input_type is InputType.CTRL_C:
            rl.abort_active_read()

    rl.set_default_handler(on_default)

    while not quit_requested:
        try:
            line = await rl.read(prompt)
        except ReadAbortedError:
            if not quit_requested:
                rl.println("^C")
            continue
        if line.strip() in ("exit", "quit"):
            break
        rl.println(line)


async def _run(args: argparse.Namespace) -> None:
    config = ReadlineConfig.from_env()
    if args.history_file is not None:
        config.history_path = args.history_file or None

    term = ProcessTerminal()
    rl = Readline(config)
    rl.set_check_handler(is_balanced)
    rl.set_highlighter(bracket_highlighter())
    rl.activate(term)
    term.start()
    try:
        await repl(rl, args.prompt)
    finally:
        rl.println("")
        rl.dispose()
        term.stop()


def main() -> None:
    parser = argparse.ArgumentParser(description="pi-readline: interactive line editor demo")
    parser.add_argument("--prompt", default="> ", help="Prompt to show (default: '> ')")
    parser.add_argument(
        "--history-file",
        default=None,
        help="History file; an empty value keeps history in memory",
    )
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
