"""Runtime environment for Luna.

An Environment is one frame of bindings from Symbols to values plus a link to
the enclosing frame (`outer`). Frames are shared by reference: every closure
created while a frame was active keeps it alive, and a `set!` through any of
them is visible to all the others.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator, Optional

from luna import SchemeValue
from luna.errors import SchemeTypeError, UnassignedVariable, UnboundVariable
from luna.types.markers import Unassigned
from luna.types.symbol import Symbol


class Environment:
    """Hierarchical mapping from Symbols to Scheme values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[Symbol, SchemeValue] = {}
        self.outer: Environment | None = outer

    def child(self) -> Environment:
        """Create a new, empty frame whose parent is this one."""
        return Environment(self)

    def define(self, name: Symbol, value: SchemeValue) -> None:
        """Bind `name` to `value` in this frame, replacing any binding it had here."""
        if not isinstance(name, Symbol):
            raise SchemeTypeError("define", "a symbol", name)
        self.vars[name] = value

    def find(self, name: Symbol) -> Optional[Environment]:
        """Find the nearest frame in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def set(self, name: Symbol, value: SchemeValue) -> None:
        """Update the innermost existing binding of `name`.

        Raises UnboundVariable if no frame in the chain binds it; a new
        binding is never created.
        """
        env = self.find(name)
        if env is None:
            raise UnboundVariable(name)
        env.vars[name] = value

    def lookup(self, name: Symbol) -> SchemeValue:
        """Look up the value bound to `name`, walking outward through the chain."""
        env: Optional[Environment] = self
        while env is not None:
            vars_ = env.vars
            if name in vars_:
                value = vars_[name]
                if value is Unassigned:
                    raise UnassignedVariable(name)
                return value
            env = env.outer
        raise UnboundVariable(name)

    def update(self, mapping: dict[Symbol, SchemeValue]) -> None:
        """Bulk-define a mapping of Symbol -> value in the current frame."""
        for k, v in mapping.items():
            self.define(k, v)

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def names(self) -> Iterator[Symbol]:
        """Every name visible from this frame, innermost first, without duplicates."""
        seen: set[Symbol] = set()
        env: Optional[Environment] = self
        while env is not None:
            for name in env.vars:
                if name not in seen:
                    seen.add(name)
                    yield name
            env = env.outer

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(str(k) for k in self.vars))
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Chain representation for debugging; shows names only, not values."""
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            env: Optional[Environment] = self
            first = True
            while env is not None:
                if not first:
                    buffer.write(" -> ")
                env._write_vars(buffer)
                first = False
                env = env.outer
            buffer.write(">")
            return buffer.getvalue()
