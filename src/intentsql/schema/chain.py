"""Column initializer chains: ``t.text("email").notNull().unique()``.

A column initializer is a root type call followed by modifier calls. The
chain is unwound once, outermost call first, into a ``MethodChain`` whose
modifiers are in source order.
"""

from __future__ import annotations

from dataclasses import dataclass

from intentsql.parsing.nodes import NodeKind, kind_of, unwrap
from intentsql.parsing.treesitter import Node, call_arguments, node_text, property_name


@dataclass(frozen=True, slots=True)
class ChainCall:
    """One call in a chain: its callee name and argument expressions."""

    name: str
    arguments: tuple[Node, ...]

    def argument(self, index: int) -> Node | None:
        return self.arguments[index] if index < len(self.arguments) else None


@dataclass(frozen=True, slots=True)
class MethodChain:
    root: ChainCall
    modifiers: tuple[ChainCall, ...] = ()
    namespace: str | None = None  # "t" for t.text(...)

    def has(self, name: str) -> bool:
        return any(call.name == name for call in self.modifiers)

    def calls(self, name: str) -> list[ChainCall]:
        return [call for call in self.modifiers if call.name == name]

    def last(self, name: str) -> ChainCall | None:
        found = self.calls(name)
        return found[-1] if found else None


def unwind_chain(node: Node) -> MethodChain | None:
    """Fold a call chain into a ``MethodChain``; None if it is not one.

    The root is the innermost call, named either by a bare identifier
    (``uuid("id")``) or by a property of a plain identifier
    (``t.uuid("id")``).
    """
    modifiers: list[ChainCall] = []
    current = unwrap(node)
    while kind_of(current) is NodeKind.CALL:
        callee = current.child_by_field_name("function")
        if callee is None:
            return None
        callee = unwrap(callee)
        arguments = tuple(call_arguments(current))

        match kind_of(callee):
            case NodeKind.IDENTIFIER:
                root = ChainCall(node_text(callee), arguments)
                return MethodChain(root=root, modifiers=tuple(reversed(modifiers)))
            case NodeKind.PROPERTY_ACCESS:
                name = property_name(callee)
                receiver = callee.child_by_field_name("object")
                if name is None or receiver is None:
                    return None
                receiver = unwrap(receiver)
                if kind_of(receiver) is NodeKind.IDENTIFIER:
                    return MethodChain(
                        root=ChainCall(name, arguments),
                        modifiers=tuple(reversed(modifiers)),
                        namespace=node_text(receiver),
                    )
                modifiers.append(ChainCall(name, arguments))
                current = receiver
            case _:
                return None
    return None
