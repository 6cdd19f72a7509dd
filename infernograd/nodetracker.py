"""Registry of live node ids and their optional names."""

from __future__ import annotations

import sys
from typing import ClassVar, TextIO


class NodeTracker:
    """Process-wide map from node id to a display name."""

    _names: ClassVar[dict[int, str]] = {}

    @classmethod
    def add_id(cls, node_id: int, name: str = "") -> None:
        """Register ``node_id`` with ``name``, replacing any earlier name."""
        cls._names[node_id] = name

    @classmethod
    def remove_id(cls, node_id: int) -> None:
        """Forget ``node_id``; unknown ids are ignored."""
        cls._names.pop(node_id, None)

    @classmethod
    def update_name(cls, node_id: int, name: str) -> None:
        """Rename a registered id; unknown ids are ignored."""
        if node_id in cls._names:
            cls._names[node_id] = name

    @classmethod
    def get_name(cls, node_id: int) -> str:
        """Return the name of ``node_id``, or an empty string if unknown."""
        return cls._names.get(node_id, "")

    @classmethod
    def has_id(cls, node_id: int) -> bool:
        """Return whether ``node_id`` is registered."""
        return node_id in cls._names

    @classmethod
    def dump_ids(cls, stream: TextIO | None = None) -> None:
        """Write every registered id, in ascending order, with its name if any."""
        out = sys.stdout if stream is None else stream
        out.write("ID List : \n")
        for node_id, name in sorted(cls._names.items()):
            line = f"ID: {node_id}"
            if name:
                line += f', Name: "{name}"'
            out.write(line + "\n")

    @classmethod
    def clear(cls) -> None:
        """Forget every registered id."""
        cls._names.clear()