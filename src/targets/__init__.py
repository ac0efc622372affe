"""Compilation target resolution."""

from targets.display import display_names
from targets.resolver import TargetResolver, TargetSet

__all__ = ["TargetResolver", "TargetSet", "display_names"]
