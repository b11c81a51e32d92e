"""
Derived data models.

Snapshot structures computed from the price window each cycle.
"""
