"""Interactive shell around the parser, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .parser_rd import parse_source
from .render import render
from .tree import is_none
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled, set_env_flag

PROMPT = "parser> "
SHORT_WELCOME = "Welcome to the recursive descent AST parser."
LONG_WELCOME = (
    "Input a line of code, and the parser will return the AST. "
    "Exit by closing the input stream, e.g. Ctrl-D."
)

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback in diagnostics", "[on|off]"),
    "/tree": ("Toggle printing the lark tree under each result", "[on|off]"),
}

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


@dataclass
class ReplOptions:
    show_tree: bool = False


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _toggle(arg: str, current: bool) -> Optional[bool]:
    """Resolve an on/off/empty argument; None means the argument is invalid."""
    arg = arg.lower()
    if arg in _ON:
        return True
    if arg in _OFF:
        return False
    if arg == "":
        return not current
    return None


def _handle_slash(line: str, options: ReplOptions) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        state = _toggle(arg, debug_py_trace_enabled())
        if state is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        set_env_flag(DEBUG_PY_TRACE_ENV, state)
        print(f"Python traceback: {'on' if state else 'off'}")
        return True

    if cmd == "/tree":
        state = _toggle(arg, options.show_tree)
        if state is None:
            print("Usage: /tree [on|off]", file=sys.stderr)
            return True

        options.show_tree = state
        print(f"Tree output: {'on' if state else 'off'}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def evaluate_line(text: str, options: ReplOptions,
                  out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> None:
    """Parse one line and print its rendering; diagnostics go to err."""
    out = out if out is not None else sys.stdout
    tree = parse_source(text, err=err)
    if is_none(tree):
        return

    print(render(tree), file=out)
    if options.show_tree:
        print(tree.pretty(), file=out, end="")


def repl() -> None:
    """Interactive read-parse-print loop with prompt_toolkit."""
    options = ReplOptions()
    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print(SHORT_WELCOME)
    print(LONG_WELCOME)
    print()

    while True:
        try:
            text = session.prompt(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, options):
            continue

        evaluate_line(text, options)

    print("Exiting REPL...")


def main(argv: Optional[List[str]] = None) -> None:
    """Parse each argument as one line, or start the REPL without arguments."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        repl()
        return

    options = ReplOptions()
    for arg in args:
        if arg == "--tree":
            options.show_tree = True
            continue
        evaluate_line(_normalize(arg), options)


if __name__ == "__main__":
    main()
