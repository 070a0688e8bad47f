"""Output and input builtins.

Ports are Python text streams. The default output port is looked up as
`sys.stdout` on every call, so redirection (pytest's capsys, contextlib's
redirect_stdout) takes effect without re-registering anything.
"""

from __future__ import annotations

import sys
from typing import TextIO

from luna import SchemeValue
from luna.builtin.registry import builtin, check_char, check_string
from luna.errors import SchemeTypeError
from luna.printer import to_display_string, to_write_string
from luna.types.environment import Environment
from luna.types.markers import Eof, Unspecified
from luna.types.mstring import MString


def _output_port(procedure: str, args: list[SchemeValue], index: int) -> TextIO:
    if len(args) <= index:
        return sys.stdout
    port = args[index]
    if not hasattr(port, "write"):
        raise SchemeTypeError(procedure, "an output port", port)
    return port


def _input_port(procedure: str, args: list[SchemeValue], index: int) -> TextIO:
    if len(args) <= index:
        return sys.stdin
    port = args[index]
    if not hasattr(port, "readline"):
        raise SchemeTypeError(procedure, "an input port", port)
    return port


@builtin("display", (1, 2))
def display(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(display obj [port]) write obj for humans: strings and characters without quoting."""
    _output_port("display", args, 1).write(to_display_string(args[0]))
    return Unspecified


@builtin("write", (1, 2))
def write(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(write obj [port]) write obj in a form the reader can read back."""
    _output_port("write", args, 1).write(to_write_string(args[0]))
    return Unspecified


@builtin("newline", (0, 1))
def newline(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(newline [port]) write an end of line."""
    _output_port("newline", args, 0).write("\n")
    return Unspecified


@builtin("write-string", (1, 2))
def write_string(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(write-string string [port]) write the characters of string."""
    _output_port("write-string", args, 1).write(check_string("write-string", args[0]).value)
    return Unspecified


@builtin("write-char", (1, 2))
def write_char(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(write-char char [port]) write a single character."""
    _output_port("write-char", args, 1).write(check_char("write-char", args[0]).value)
    return Unspecified


@builtin("flush-output-port", (0, 1))
def flush_output_port(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(flush-output-port [port])"""
    _output_port("flush-output-port", args, 0).flush()
    return Unspecified


@builtin("current-output-port", 0)
def current_output_port(env: Environment, args: list[SchemeValue]) -> TextIO:
    """(current-output-port) the default output port."""
    return sys.stdout


@builtin("current-input-port", 0)
def current_input_port(env: Environment, args: list[SchemeValue]) -> TextIO:
    """(current-input-port) the default input port."""
    return sys.stdin


@builtin("read-line", (0, 1))
def read_line(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(read-line [port]) the next line without its terminator, or the eof object."""
    line = _input_port("read-line", args, 0).readline()
    if not line:
        return Eof
    return MString(line[:-1] if line.endswith("\n") else line)


@builtin("eof-object", 0)
def eof_object(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(eof-object) the end-of-file object."""
    return Eof


@builtin("eof-object?", 1)
def is_eof_object(env: Environment, args: list[SchemeValue]) -> bool:
    """(eof-object? obj)"""
    return args[0] is Eof
