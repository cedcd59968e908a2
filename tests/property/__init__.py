"""Property-based tests for catsa-janga.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of.

Test categories:
- core/: Snapshot codec and checkpoint store round trips, NaN rejection
"""
