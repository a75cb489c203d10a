"""Version calculation engine."""

from gitsemver.calculation.base_version import BaseVersionCalculator, version_from_branch_name
from gitsemver.calculation.increment import IncrementResolver, find_message_increment
from gitsemver.calculation.labels import LabelSynthesizer
from gitsemver.calculation.models import BaseVersionCandidate, CalculationContext, VersionResult
from gitsemver.calculation.next_version import MAX_DEPTH, NextVersionCalculator, calculate

__all__ = [
    # Stages
    "BaseVersionCalculator",
    "IncrementResolver",
    "LabelSynthesizer",
    "NextVersionCalculator",
    # Models
    "BaseVersionCandidate",
    "CalculationContext",
    "VersionResult",
    # Functions
    "calculate",
    "find_message_increment",
    "version_from_branch_name",
    "MAX_DEPTH",
]
