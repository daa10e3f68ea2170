# turbinekin/viewer/transform_stack.py
from __future__ import annotations

import logging
from typing import List, Optional

from .types import Mat4


class TransformStack:
    """
    LIFO of accumulated transforms for one traversal pass.

    top()/pop() on an empty stack do not raise: the underflow is logged,
    counted, and None comes back so the caller can skip that draw.
    """

    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._elements: List[Mat4] = []
        self.underflows = 0
        self.pushes = 0
        self.pops = 0
        self._log = logger or logging.getLogger("turbinekin")

    def __len__(self) -> int:
        return len(self._elements)

    @property
    def depth(self) -> int:
        return len(self._elements)

    def push(self, m: Mat4) -> None:
        self._elements.append(m)
        self.pushes += 1

    def top(self) -> Optional[Mat4]:
        if not self._elements:
            self._underflow("top")
            return None
        return self._elements[-1]

    def pop(self) -> Optional[Mat4]:
        if not self._elements:
            self._underflow("pop")
            return None
        self.pops += 1
        return self._elements.pop()

    def is_empty(self) -> bool:
        return not self._elements

    def drain(self) -> int:
        """Drop everything left on the stack; returns how many entries were dropped."""
        n = len(self._elements)
        self._elements.clear()
        return n

    def _underflow(self, op: str) -> None:
        self.underflows += 1
        self._log.warning("transform stack underflow on %s() (depth=0, pushes=%d, pops=%d)", op, self.pushes, self.pops)
