"""A small teaching kernel simulated in Python: memory, devices, allocators, tasks and a shell."""

__version__ = "0.1.0"