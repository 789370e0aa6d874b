"""Shared constants and export configuration."""

from dataclasses import dataclass
from typing import Optional, Tuple

# Processor limits (LExecutor.maxInstructions / LExecutor.maxGraphicsBuffer)
MAX_INSTRUCTIONS = 1000
MAX_GRAPHICS_BUFFER = 256

# Display block name -> drawable pixels per edge
DISPLAY_TYPES = {
    "logic-display": 80,
    "large-logic-display": 176,
}

PROCESSOR_TYPES = ("micro-processor", "logic-processor", "hyper-processor")

# Color of an empty display, used when blending translucent pixels
DISPLAY_BACKGROUND: Tuple[int, int, int] = (86, 86, 102)

LINK_PREFIX = "display"


@dataclass(frozen=True)
class ResourceLimits:
    """Per-processor budgets shared read-only by every tile of one export."""

    instruction_budget: int = MAX_INSTRUCTIONS
    buffer_slots: int = MAX_GRAPHICS_BUFFER

    def __post_init__(self) -> None:
        if self.instruction_budget <= 0:
            raise ValueError(
                f"instruction_budget must be positive, got {self.instruction_budget}"
            )
        if self.buffer_slots <= 0:
            raise ValueError(f"buffer_slots must be positive, got {self.buffer_slots}")


@dataclass(frozen=True)
class ExportConfig:
    """Settings for one image export run.

    ``quality``, ``use_hsv`` and ``use_gray_transparency`` only affect how
    pixels are grouped into colored rectangles; the code generator and the
    layout assembler never look at them.
    """

    display_type: str = "logic-display"
    unit_display_size: Optional[int] = None
    requested_count: int = 1
    instruction_budget: int = MAX_INSTRUCTIONS
    buffer_slots: int = MAX_GRAPHICS_BUFFER
    use_gray_transparency: bool = False
    quality: int = 255
    use_hsv: bool = False
    processor_type: str = "micro-processor"
    schematic_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.display_type not in DISPLAY_TYPES:
            raise ValueError(
                f"Unknown display type '{self.display_type}', "
                f"expected one of: {', '.join(DISPLAY_TYPES)}"
            )
        if self.processor_type not in PROCESSOR_TYPES:
            raise ValueError(
                f"Unknown processor type '{self.processor_type}', "
                f"expected one of: {', '.join(PROCESSOR_TYPES)}"
            )
        if self.unit_display_size is not None and self.unit_display_size <= 0:
            raise ValueError(
                f"unit_display_size must be positive, got {self.unit_display_size}"
            )
        if self.requested_count < 1:
            raise ValueError(
                f"requested_count must be at least 1, got {self.requested_count}"
            )
        if not 0 <= self.quality <= 255:
            raise ValueError(f"quality must be within 0-255, got {self.quality}")
        # Reuse the budget checks
        self.limits

    @property
    def display_size(self) -> int:
        """Pixels per tile edge."""
        if self.unit_display_size is not None:
            return self.unit_display_size
        return DISPLAY_TYPES[self.display_type]

    @property
    def limits(self) -> ResourceLimits:
        return ResourceLimits(self.instruction_budget, self.buffer_slots)


DEFAULT_CONFIG = ExportConfig()
