"""Read-Eval-Print Loop with history, completion, and ':' commands."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory, InMemoryHistory

from ratcalc.config import Settings
from ratcalc.errors import CalcError
from ratcalc.evaluator import FUNCTION_NAMES
from ratcalc.expr import Expr
from ratcalc.printer import format_expr, format_structural
from ratcalc.session import Session

logger = logging.getLogger(__name__)

_HELP_TOPICS: Dict[str, str] = {
    'general': (
        "Rational calculator help:\n"
        "Exact arithmetic on fractions; unknown names stay symbolic.\n"
        "Examples:\n"
        "  1/3 + 1/6        -> 1/2\n"
        "  x = 5            bind x\n"
        "  2 x              -> 10 (juxtaposition multiplies)\n"
        "  floor 7.8        -> 7\n"
        "  y + 2 * 3        -> y + 6\n"
        "  x = 2, x ^ 10    -> 2, 1024\n"
        "Commands:\n"
        "  :help, help [topic]    show help (topics: operators, functions)\n"
        "  :vars                  list variables\n"
        "  :unset <name>          remove a variable\n"
        "  :clear                 remove all variables\n"
        "  :exit                  exit\n"
    ),
    'operators': (
        "Operators and precedence (high -> low):\n"
        "  prefix: - +\n"
        "  exponent: ^ (right-assoc, integer exponents only)\n"
        "  * / % and juxtaposition (a b)\n"
        "  + -\n"
        "  = (comparison; 'name = expr' at top level assigns)\n"
        "  , separates independent expressions\n"
        "Notes:\n"
        "  - '%' keeps the sign of the dividend.\n"
        "  - Non-integer exponents are left unevaluated.\n"
    ),
    'functions': (
        "Built-in functions (apply by juxtaposition, e.g. 'round 2.5'):\n"
        + ", ".join(FUNCTION_NAMES) + "\n"
    ),
}


def show_help(topic: Optional[str] = None) -> str:
    """Return help text for topic or general if None."""
    if not topic:
        return _HELP_TOPICS['general']
    key = topic.lower()
    return _HELP_TOPICS.get(key, f"No help available for topic '{topic}'")


class REPL:
    """Read-Eval-Print Loop for the calculator."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[Session] = None):
        self.settings = settings or Settings()
        self.session = session or Session(self.settings)
        self._prompt_session: Optional[PromptSession] = None

    @property
    def context(self):
        return self.session.context

    def format(self, expr: Expr) -> str:
        if self.settings.display == 'structural':
            return format_structural(expr)
        return format_expr(expr)

    def _process_command(self, line: str) -> Optional[str]:
        """Process commands starting with ':' or 'help'. Returns response string if a command, else None."""
        s = line.strip()
        if not s:
            return None
        if s.startswith(':'):
            body = s[1:].lstrip()
            if body == '':
                return "No command specified. Use :help for available commands."
            parts = body.split(None, 1)
            cmd = parts[0]
            args = parts[1].split() if len(parts) > 1 else []
            return self._run_command(cmd, args)
        # help keyword at line start: allow 'help' or 'help topic'
        parts = s.split(None, 1)
        if parts[0].lower() == 'help':
            return show_help(parts[1].strip() if len(parts) > 1 else None)
        return None

    def _run_command(self, cmd: str, args: List[str]) -> Optional[str]:
        """Execute a REPL colon command. Raises EOFError for exit/quit to allow outer loop to handle shutdown."""
        cmd_lower = cmd.lower()
        if cmd_lower in {'exit', 'quit'}:
            raise EOFError()
        if cmd_lower == 'help':
            topic = args[0] if args else None
            return show_help(topic)
        if cmd_lower == 'vars':
            items = self.context.items()
            if not items:
                return "(no variables)"
            return "\n".join(f"{k} = {self.format(v)}" for k, v in items)
        if cmd_lower == 'unset':
            if not args:
                return "Usage: :unset <name>"
            removed = [name for name in args if self.context.unset(name)]
            missing = [name for name in args if name not in removed]
            if missing:
                return f"Not bound: {', '.join(missing)}"
            return f"Removed {', '.join(removed)}"
        if cmd_lower == 'clear':
            count = len(self.context)
            self.context.clear()
            return f"Cleared {count} variables"
        return f"Unknown command: {cmd}"

    def evaluate_line(self, line: str) -> Tuple[bool, str]:
        """Evaluate a single line (either command or expression). Returns (ok, output)."""
        cmd_out = self._process_command(line)
        if cmd_out is not None:
            return True, cmd_out
        try:
            result = self.session.run_line(line)
            return True, self.format(result)
        except CalcError as e:
            logger.debug(f"{type(e).__name__}: {e}")
            return False, f"Error: {e}"

    def _completer(self) -> WordCompleter:
        words = list(FUNCTION_NAMES) + self.context.names()
        return WordCompleter(words)

    def _get_prompt_session(self) -> PromptSession:
        if self._prompt_session is None:
            if self.settings.use_history:
                history = FileHistory(self.settings.history_file)
            else:
                history = InMemoryHistory()
            self._prompt_session = PromptSession(history=history)
        return self._prompt_session

    def repl_loop(self) -> None:
        """Interactive loop; Ctrl-C discards the current line, Ctrl-D exits."""
        print("Rational calculator REPL. Type :help for help. Ctrl-D or :exit to quit.")
        prompt_session = self._get_prompt_session()
        while True:
            try:
                line = prompt_session.prompt(self.settings.prompt, completer=self._completer())
            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print("Exiting.")
                break
            if not line.strip():
                continue
            try:
                ok, out = self.evaluate_line(line)
            except EOFError:
                print("Exiting.")
                break
            print(out)
