"""Consistency bounded context.

Periodically compares tenant-owned virtual objects with their mirrors in the
shared super store and repairs the drift it finds.
"""
