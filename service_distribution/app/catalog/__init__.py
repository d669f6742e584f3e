"""
City catalog loading.

The catalog is read once, before evaluation, into an ordered list of
immutable City records.
"""
