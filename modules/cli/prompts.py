"""
Operator Input.

Line-oriented prompts that re-ask until the input parses.

Numbers are plain ASCII decimal: no digit separators ("1_000") and no
non-ASCII digits, even though int() and float() would accept them.
"""

import math
import re
from collections.abc import Callable

from rich.console import Console

WHOLE_NUMBER = re.compile(r"[+-]?[0-9]+")
DECIMAL_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Prompter:
    """Read trimmed values from the operator."""

    def __init__(self, console: Console, input_func: Callable[[], str] = input):
        self.console = console
        self._input = input_func

    def _say(self, text: str, end: str = "\n") -> None:
        self.console.print(text, end=end, markup=False, highlight=False, soft_wrap=True)

    def read_string(self, prompt: str) -> str:
        """Print the prompt and return the trimmed line. EOFError propagates."""
        self._say(prompt, end="")
        return self._input().strip()

    def read_int(self, prompt: str) -> int:
        while True:
            value = self.read_string(prompt)
            if WHOLE_NUMBER.fullmatch(value):
                return int(value)
            self._say("   Error: Please enter a valid whole number.")

    def read_float(self, prompt: str) -> float:
        while True:
            value = self.read_string(prompt)
            if DECIMAL_NUMBER.fullmatch(value):
                number = float(value)
                # "1e999" overflows to inf
                if math.isfinite(number):
                    return number
            self._say("   Error: Please enter a valid number (e.g., 49.99).")
