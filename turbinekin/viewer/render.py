#turbinekin/viewer/render.py
from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from .types import DrawCall, Mat4


class Renderer(Protocol):
    def draw(self, world: Mat4, shape: Mat4, mesh_id: str) -> None:
        ...


@runtime_checkable
class NodeAwareRenderer(Renderer, Protocol):
    """
    Optional extension of Renderer: begin_node() is called with the node id
    right before that node's draw().
    """
    def begin_node(self, node_id: str) -> None:
        ...


class RecordingRenderer:
    """
    Headless renderer: keeps every draw in submission order.
    Implements NodeAwareRenderer so each DrawCall carries its node id.
    """
    def __init__(self) -> None:
        self.calls: List[DrawCall] = []
        self._node_id: Optional[str] = None

    def begin_node(self, node_id: str) -> None:
        self._node_id = node_id

    def draw(self, world: Mat4, shape: Mat4, mesh_id: str) -> None:
        self.calls.append(DrawCall(node_id=self._node_id or "", world=world, shape=shape, mesh_id=mesh_id))

    def clear(self) -> None:
        self.calls.clear()

    def by_node(self) -> dict[str, DrawCall]:
        return {c.node_id: c for c in self.calls}
