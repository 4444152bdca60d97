"""I/O subsystem — interrupt vectors, device delays, kernel entry/exit.

Re-exports public symbols so callers can write::

    from py_interrupts.io import InterruptProtocol, VectorTable
"""

from py_interrupts.io.interrupts import (
    DeviceDelayTable,
    InterruptIndexError,
    InterruptProtocol,
    VectorTable,
    vector_address,
)

__all__ = [
    "DeviceDelayTable",
    "InterruptIndexError",
    "InterruptProtocol",
    "VectorTable",
    "vector_address",
]
