"""Stimulus generators — where logical addresses and process sizes come from.

The memory manager never invents its own inputs.  A driver feeds it
process sizes and logical addresses from two small interfaces:

- ``AddressGenerator.next_address()`` → an address in
  ``[0, virtual_memory_size)``.
- ``SizeGenerator.process_size()`` → a declared size in
  ``[min_process_size, max_process_size]``, and
  ``SizeGenerator.request_size(declared)`` → a request in
  ``[1, declared]``.

Both are Protocols, so tests can pass a scripted sequence and the
console driver can pass the random implementations below.  The random
ones take an optional seed so a run can be reproduced.
"""

import random
from collections.abc import Iterable, Iterator
from typing import Protocol

from mmu_sim.config import MmuConfig


class AddressGenerator(Protocol):
    """Source of logical addresses."""

    def next_address(self) -> int:
        """Return the next logical address."""
        ...


class SizeGenerator(Protocol):
    """Source of declared and requested process sizes."""

    def process_size(self) -> int:
        """Return the next declared process size."""
        ...

    def request_size(self, declared_size: int) -> int:
        """Return a request size for a process of *declared_size* bytes."""
        ...


class RandomAddressGenerator:
    """Uniformly random logical addresses over the virtual address space."""

    def __init__(self, config: MmuConfig, *, seed: int | None = None) -> None:
        """Create a generator for *config*'s address space."""
        self._limit = config.virtual_memory_size
        self._rng = random.Random(seed)  # noqa: S311

    def next_address(self) -> int:
        """Return an address in ``[0, virtual_memory_size)``."""
        return self._rng.randrange(self._limit)


class RandomSizeGenerator:
    """Uniformly random process and request sizes."""

    def __init__(self, config: MmuConfig, *, seed: int | None = None) -> None:
        """Create a generator bounded by *config*'s process size limits."""
        self._min = config.min_process_size
        self._max = config.max_process_size
        self._rng = random.Random(seed)  # noqa: S311

    def process_size(self) -> int:
        """Return a size in ``[min_process_size, max_process_size]``."""
        return self._rng.randint(self._min, self._max)

    def request_size(self, declared_size: int) -> int:
        """Return a size in ``[1, declared_size]``."""
        return self._rng.randint(1, declared_size)


class ScriptedAddressGenerator:
    """Replay a fixed sequence of addresses (useful for demos and tests)."""

    def __init__(self, addresses: Iterable[int]) -> None:
        """Create a generator that yields *addresses* in order."""
        self._addresses: Iterator[int] = iter(addresses)

    def next_address(self) -> int:
        """Return the next scripted address.

        Raises:
            StopIteration: When the script is exhausted.

        """
        return next(self._addresses)


class ScriptedSizeGenerator:
    """Replay fixed sequences of declared and requested sizes.

    Requested sizes of ``None`` mean "request everything declared".
    """

    def __init__(self, sizes: Iterable[int], requests: Iterable[int | None] | None = None) -> None:
        """Create a generator from declared sizes and optional requests."""
        self._sizes: Iterator[int] = iter(sizes)
        self._requests: Iterator[int | None] | None = (
            iter(requests) if requests is not None else None
        )

    def process_size(self) -> int:
        """Return the next scripted declared size."""
        return next(self._sizes)

    def request_size(self, declared_size: int) -> int:
        """Return the next scripted request, or *declared_size*."""
        if self._requests is None:
            return declared_size
        request = next(self._requests)
        return declared_size if request is None else request
