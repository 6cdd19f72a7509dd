"""Reverse-mode gradient engine: graph nodes, gradient routing and backprop."""

from __future__ import annotations

import threading
import weakref
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

from infernograd.logger import Logger, LogLevel

_grad_enabled = True
_local = threading.local()


def is_grad_enabled() -> bool:
    """Return whether operations currently record graph nodes."""
    return _grad_enabled


class _NoGradContext:
    """Context manager that switches gradient tracking off and restores it on exit."""

    def __init__(self) -> None:
        self._previous = True

    def __enter__(self) -> "_NoGradContext":
        global _grad_enabled
        self._previous = _grad_enabled
        _grad_enabled = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        global _grad_enabled
        _grad_enabled = self._previous


def no_grad() -> _NoGradContext:
    """Return a context manager that disables gradient tracking inside its block."""
    return _NoGradContext()


class Edge:
    """A (node, slot) pair identifying where a gradient flows into the graph."""

    __slots__ = ("node", "slot")

    def __init__(self, node: "Node", slot: int = 0) -> None:
        self.node = node
        self.slot = slot

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self.node is other.node and self.slot == other.slot

    def __hash__(self) -> int:
        return hash((id(self.node), self.slot))

    def __repr__(self) -> str:
        return f"Edge({self.node!r}, {self.slot})"


class Node(ABC):
    """An operation in the graph that knows how to push gradients to its parents."""

    @abstractmethod
    def backward(self) -> None:
        """Read the incoming gradient and accumulate gradients into parent nodes."""

    @abstractmethod
    def release(self) -> None:
        """Drop references held for the backward pass."""

    @abstractmethod
    def parents(self) -> Iterable["Node | None"]:
        """Return the nodes that produced this node's inputs (``None`` for untracked inputs)."""


class AccumulateGrad(Node):
    """Leaf node that stores the gradient reaching it on the leaf's ``grad`` attribute."""

    def __init__(self, leaf: Any) -> None:
        self._ref: weakref.ref | None
        self._held: Any = None
        try:
            self._ref = weakref.ref(leaf)
        except TypeError:
            self._ref = None
            self._held = leaf

    @property
    def leaf(self) -> Any:
        """The leaf object, or ``None`` if it no longer exists."""
        if self._ref is not None:
            return self._ref()
        return self._held

    def backward(self) -> None:
        with no_grad():
            Logger.append(LogLevel.DEBUG, "AccumulateGrad::backward()")
            g_in = Engine.grad_in(self, 0)
            leaf = self.leaf
            if leaf is None:
                return
            leaf.grad = g_in

    def release(self) -> None:
        """Drop the dead weak reference once the leaf is gone; a live leaf stays attached."""
        if self._ref is not None and self._ref() is None:
            self._ref = None
            self._held = None

    def parents(self) -> tuple[()]:
        return ()


class Engine:
    """Drives the backward pass over a graph of nodes."""

    @classmethod
    def _grad_map(cls) -> dict[Edge, Any] | None:
        return getattr(_local, "grad_map", None)

    @classmethod
    def backward(cls, root: Node | None, seed: Any = 1.0) -> None:
        """Seed ``root`` with ``seed`` and run every reachable node's backward in reverse order."""
        Logger.append(LogLevel.DEBUG, "*********** running backward ***********")
        if root is None:
            Logger.append(LogLevel.ERROR, "*********** didnt find a root ***********")
            raise ValueError("backward: tensor has no gradient node")

        previous = cls._grad_map()
        _local.grad_map = {}
        try:
            Logger.append(LogLevel.DEBUG, "*********** building topo ***********")
            topo = cls.build_topo(root)
            Logger.append(LogLevel.DEBUG, f"Built topo with size: {len(topo)}")

            cls.accumulate(root, 0, seed)
            for node in reversed(topo):
                node.backward()
            for node in topo:
                node.release()
        finally:
            _local.grad_map.clear()
            _local.grad_map = previous

    @classmethod
    def build_topo(cls, root: Node | None) -> list[Node]:
        """Return reachable nodes with every node placed after all of its parents."""
        topo: list[Node] = []
        if root is None:
            return topo
        visited = {id(root)}
        stack: list[tuple[Node, Iterator[Node | None]]] = [(root, iter(root.parents()))]
        while stack:
            node, pending = stack[-1]
            for parent in pending:
                if parent is not None and id(parent) not in visited:
                    visited.add(id(parent))
                    stack.append((parent, iter(parent.parents())))
                    break
            else:
                stack.pop()
                topo.append(node)
        return topo

    @classmethod
    def accumulate(cls, node: Node | None, slot: int, grad: Any) -> None:
        """Add ``grad`` to the gradient gathered for ``(node, slot)`` in the current pass."""
        with no_grad():
            grad_map = cls._grad_map()
            if node is None or grad_map is None:
                return
            edge = Edge(node, slot)
            if edge in grad_map:
                grad_map[edge] = grad_map[edge] + grad
            else:
                grad_map[edge] = grad

    @classmethod
    def grad_in(cls, node: Node, slot: int = 0) -> Any:
        """Return the gradient gathered for ``(node, slot)``, or ``None`` if there is none."""
        grad_map = cls._grad_map()
        if grad_map is None:
            return None
        return grad_map.get(Edge(node, slot))