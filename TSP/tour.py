"""
Immutable tour value type.

A Tour stores the visiting order of a Hamiltonian cycle as a read-only integer
array. The edge from the last city back to the first is implicit. The successor
view (`successors[c]` is the city visited right after `c`) is derived on demand
for pheromone bookkeeping and for ants, which build tours edge by edge.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

import numpy as np

from Core.errors import InvalidConfiguration

UNVISITED = -1


class Tour:
    """A permutation of `0..N-1` read as a closed cycle."""

    __slots__ = ("_order",)

    def __init__(self, order: Iterable[int]):
        arr = np.array(list(order) if not isinstance(order, np.ndarray) else order, dtype=np.int64)
        if arr.ndim != 1 or arr.size == 0:
            raise InvalidConfiguration("A tour must be a non-empty 1-D sequence of city indices.")
        if not is_permutation(arr):
            raise InvalidConfiguration(f"Tour is not a permutation of 0..{arr.size - 1}: {arr.tolist()}")
        arr.flags.writeable = False
        self._order = arr

    @classmethod
    def from_successors(cls, successors: Iterable[int], start: int = 0) -> "Tour":
        """Rebuild a visiting order by following a complete successor array."""
        succ = np.asarray(list(successors) if not isinstance(successors, np.ndarray) else successors,
                          dtype=np.int64)
        n = int(succ.size)
        if n == 0 or not 0 <= start < n:
            raise InvalidConfiguration("start city out of range for successor array")
        order: List[int] = []
        seen = np.zeros(n, dtype=bool)
        city = int(start)
        for _ in range(n):
            if not 0 <= city < n or seen[city]:
                raise InvalidConfiguration("Successor array does not describe a single cycle.")
            seen[city] = True
            order.append(city)
            city = int(succ[city])
        if city != start:
            raise InvalidConfiguration("Successor array does not close back on its start city.")
        return cls(order)

    @property
    def order(self) -> np.ndarray:
        return self._order

    @property
    def num_cities(self) -> int:
        return int(self._order.size)

    def successors(self) -> np.ndarray:
        succ = np.empty_like(self._order)
        succ[self._order] = np.roll(self._order, -1)
        return succ

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Yield every (city, successor) leg, including the closing one."""
        nxt = np.roll(self._order, -1)
        for a, b in zip(self._order.tolist(), nxt.tolist()):
            yield a, b

    def length(self, distances) -> float:
        """Sum of successor-edge distances, closing edge included."""
        weights = np.asarray(getattr(distances, "weights", distances))
        return float(weights[self._order, np.roll(self._order, -1)].sum())

    def tolist(self) -> List[int]:
        return self._order.tolist()

    def __len__(self) -> int:
        return int(self._order.size)

    def __iter__(self) -> Iterator[int]:
        return iter(self._order.tolist())

    def __getitem__(self, index):
        return self._order[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tour):
            return NotImplemented
        return np.array_equal(self._order, other._order)

    def __hash__(self) -> int:
        return hash(self._order.tobytes())

    def __repr__(self) -> str:
        return f"Tour({self._order.tolist()})"


def is_permutation(values: Iterable[int]) -> bool:
    """True when `values` holds each of `0..len(values)-1` exactly once."""
    arr = np.asarray(list(values) if not isinstance(values, np.ndarray) else values)
    if arr.ndim != 1 or arr.dtype.kind not in {"i", "u"}:
        return False
    n = arr.size
    if n == 0 or arr.min() < 0 or arr.max() >= n:
        return False
    return bool(np.all(np.bincount(arr, minlength=n) == 1))
