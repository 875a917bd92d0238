"""A small teaching kernel: cooperative threads, a FIFO scheduler and synchronisation primitives."""

__version__ = "0.1.0"