"""Everyday helpers: bits, bytes, caches, closers, events, archives, POSIX shared memory, HTTP sending and WSGI middlewares."""

__version__ = "0.1.0"