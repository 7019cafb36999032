"""Browser-facing JSON API for the MMU simulator.

This package provides a Flask application that exposes one memory
manager over HTTP.  It is an **optional** extra — install with::

    pip install mmu-sim[web]

The ``create_app`` factory in ``app.py`` builds a memory manager and
serves endpoints to create processes, request memory, translate
addresses, terminate processes, and read snapshots and the event log.
"""
