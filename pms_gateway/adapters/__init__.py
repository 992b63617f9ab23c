"""
Provider adapters

One sub-package per PMS vendor, each exposing a single adapter class that
implements the canonical read operations. The factory maps provider tags
to these classes; nothing is imported here.
"""
