from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

"""Data structures for the assembled processor/display layout."""


@dataclass(frozen=True)
class LogicLink:
    """Named wire from a processor to a peripheral at an absolute position."""

    name: str
    x: int
    y: int


@dataclass
class EntityPlacement:
    """Positioned block in the layout."""

    entity_id: str
    block_type: str
    position: Tuple[int, int]
    program: Optional[str] = None
    links: List[LogicLink] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TilePlacement:
    """One tile's display and the processor that draws on it."""

    display: EntityPlacement
    processor: EntityPlacement


@dataclass
class LayoutPlan:
    """Complete layout ready for schematic emission."""

    tiles: List[TilePlacement] = field(default_factory=list)
    width: int = 0
    height: int = 0
    label: str = ""

    def add_tile(self, tile: TilePlacement) -> None:
        self.tiles.append(tile)

    @property
    def processors(self) -> List[EntityPlacement]:
        return [tile.processor for tile in self.tiles]

    @property
    def displays(self) -> List[EntityPlacement]:
        return [tile.display for tile in self.tiles]

    def get_processor(self, link_name: str) -> Optional[EntityPlacement]:
        """Find the processor that links to ``link_name``."""
        for tile in self.tiles:
            if any(link.name == link_name for link in tile.processor.links):
                return tile.processor
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form used for JSON output."""
        return {
            "label": self.label,
            "width": self.width,
            "height": self.height,
            "tiles": [
                {
                    "display": {
                        "block": tile.display.block_type,
                        "position": list(tile.display.position),
                    },
                    "processor": {
                        "block": tile.processor.block_type,
                        "position": list(tile.processor.position),
                        "links": [
                            {"name": link.name, "x": link.x, "y": link.y}
                            for link in tile.processor.links
                        ],
                        "code": tile.processor.program or "",
                    },
                }
                for tile in self.tiles
            ],
        }
