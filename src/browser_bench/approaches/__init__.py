"""Browser automation approaches under comparison."""

from browser_bench.config import ApproachType

from .accessibility import AccessibilityTreeApproach
from .base import Approach, RunContext, StepFailedError
from .screenshot import ScreenshotApproach
from .semantic import SemanticToolApproach


def create_approach(approach_type: ApproachType) -> Approach:
    """Factory function to create an approach from config."""
    mapping: dict[ApproachType, type[Approach]] = {
        ApproachType.SCREENSHOT: ScreenshotApproach,
        ApproachType.SEMANTIC_TOOLS: SemanticToolApproach,
        ApproachType.ACCESSIBILITY_TREE: AccessibilityTreeApproach,
    }
    cls = mapping[approach_type]
    return cls()
