"""Error kinds raised by the MMU.

All four derive from ``MmuError`` so a caller that only wants to know
"did the MMU refuse?" can catch one class.  None of them is fatal to
the simulation as a whole; the caller decides whether to retry, skip
the process, or stop.
"""


class MmuError(Exception):
    """Base class for conditions the MMU reports to its caller."""


class CapacityExceededError(MmuError):
    """Raise when admitting a process would exceed the process limit."""


class RequestDeniedError(MmuError):
    """Raise when a memory request cannot be granted from remaining capacity."""


class AllocationFailureError(MmuError):
    """Raise when a granted request finds no contiguous run to occupy."""


class AddressOutOfRangeError(MmuError):
    """Raise when an address or index falls outside fixed table bounds."""
