from __future__ import annotations

# Names accepted after #\ and used when writing characters back out.
CHAR_NAMES: dict[str, str] = {
    "alarm": "\a",
    "backspace": "\b",
    "delete": "\x7f",
    "escape": "\x1b",
    "newline": "\n",
    "null": "\0",
    "return": "\r",
    "space": " ",
    "tab": "\t",
}

NAMES_BY_CHAR: dict[str, str] = {v: k for k, v in CHAR_NAMES.items()}


class Char:
    """A Scheme character; kept distinct from one-character strings."""

    __slots__ = ("value",)

    def __init__(self, value: str):
        self.value = value

    def __eq__(self, other) -> bool:
        return isinstance(other, Char) and self.value == other.value

    def __hash__(self) -> int:
        return hash(("char", self.value))

    def __repr__(self):
        return f"Char({self.value!r})"
