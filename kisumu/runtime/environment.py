"""
Scope chain for Kisumu evaluation.

An Environment maps names to runtime objects and may point at a parent.
Lookups walk outward; bindings only ever touch the scope they are made in,
so a ``let`` inside a block can shadow but never overwrite an outer name.

Author: xwest
"""

from typing import Dict, List, Optional

from .objects import Object


class Environment:
    """Represents one lexical scope."""

    def __init__(self, parent: Optional['Environment'] = None):
        self.symbols: Dict[str, Object] = {}
        self.parent = parent

    def get(self, name: str) -> Optional[Object]:
        """Look up a name in this scope and parent scopes."""
        if name in self.symbols:
            return self.symbols[name]

        if self.parent:
            return self.parent.get(name)

        return None

    def get_local(self, name: str) -> Optional[Object]:
        """Look up a name only in this scope (no parent traversal)."""
        return self.symbols.get(name)

    def define(self, name: str, value: Object) -> Object:
        """Create or overwrite a binding in this scope."""
        self.symbols[name] = value
        return value

    def contains_local(self, name: str) -> bool:
        return name in self.symbols

    def child(self) -> 'Environment':
        """Create a nested scope."""
        return Environment(parent=self)

    def copy(self) -> 'Environment':
        """Copy this scope's bindings; the parent chain is shared."""
        clone = Environment(parent=self.parent)
        clone.symbols = dict(self.symbols)
        return clone

    def names(self) -> List[str]:
        """All names visible from this scope, innermost first."""
        result = list(self.symbols)
        if self.parent:
            result.extend(n for n in self.parent.names() if n not in self.symbols)
        return result

    @property
    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth + 1

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __str__(self) -> str:
        bindings = ", ".join(f"{k}={v.inspect()}" for k, v in self.symbols.items())
        return f"Environment(depth={self.depth}, {{{bindings}}})"
