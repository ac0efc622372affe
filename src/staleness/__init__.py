"""Change detection relative to prior build state."""

from staleness.oracle import StaleReason, StalenessOracle

__all__ = ["StaleReason", "StalenessOracle"]
