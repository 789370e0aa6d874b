"""
Schematic emission for assembled display grids.

Converts a :class:`LayoutPlan` into an ``msch`` schematic that the game can
import, either as a file or as a base64 clipboard string.
"""

from __future__ import annotations

import base64
import re
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from display_compiler.src.common.diagnostics import ExportDiagnostics
from display_compiler.src.layout.layout_plan import EntityPlacement, LayoutPlan

from .schematic_format import (
    MAX_SHORT,
    SCHEMATIC_HEADER,
    SCHEMATIC_VERSION,
    BinaryWriter,
    encode_processor_config,
    pack_position,
)

_FLUSH_TARGET = re.compile(r"^drawflush\s+(\S+)\s*$", re.MULTILINE)
_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._ -]+")


@dataclass
class SchematicTile:
    block: str
    x: int
    y: int
    config: Optional[bytes] = None
    rotation: int = 0


@dataclass
class Schematic:
    """In-memory schematic: tags, bounds and positioned blocks."""

    width: int
    height: int
    tags: Dict[str, str] = field(default_factory=dict)
    tiles: List[SchematicTile] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.tags.get("name", "")

    @property
    def palette(self) -> List[str]:
        """Block names in order of first use."""
        blocks: List[str] = []
        for tile in self.tiles:
            if tile.block not in blocks:
                blocks.append(tile.block)
        return blocks

    def to_bytes(self) -> bytes:
        palette = self.palette
        if len(palette) > 0xFF or len(self.tags) > 0xFF:
            raise ValueError("Schematic palette and tag tables are limited to 255 entries")

        body = BinaryWriter()
        body.i16(self.width)
        body.i16(self.height)

        body.u8(len(self.tags))
        for key, value in self.tags.items():
            body.utf(key)
            body.utf(value)

        body.u8(len(palette))
        for block in palette:
            body.utf(block)

        body.i32(len(self.tiles))
        for tile in self.tiles:
            body.u8(palette.index(tile.block))
            body.i32(pack_position(tile.x, tile.y))
            body.object(tile.config)
            body.u8(tile.rotation)

        return SCHEMATIC_HEADER + bytes([SCHEMATIC_VERSION]) + zlib.compress(body.getvalue())

    def to_string(self) -> str:
        """Base64 form accepted by the game's clipboard import."""
        return base64.b64encode(self.to_bytes()).decode("ascii")

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_bytes())
        return path


class SchematicEmitter:
    """Materialize a :class:`LayoutPlan` into a :class:`Schematic`."""

    def __init__(self, diagnostics: Optional[ExportDiagnostics] = None) -> None:
        self.diagnostics = diagnostics or ExportDiagnostics()
        self.diagnostics.default_stage = "emission"

    def emit_from_plan(
        self,
        layout_plan: LayoutPlan,
        name: Optional[str] = None,
        description: str = "",
    ) -> Schematic:
        """Emit a schematic from a completed layout plan."""
        if layout_plan.width > MAX_SHORT or layout_plan.height > MAX_SHORT:
            self.diagnostics.error(
                f"Layout {layout_plan.width}x{layout_plan.height} exceeds the schematic size limit of {MAX_SHORT}"
            )

        schematic = Schematic(width=layout_plan.width, height=layout_plan.height)
        schematic.tags["name"] = name or f"!!name me ({layout_plan.label})"
        schematic.tags["description"] = description or layout_plan.label
        schematic.tags["labels"] = "[]"

        for tile in layout_plan.tiles:
            schematic.tiles.append(self._display_tile(tile.display))
            schematic.tiles.append(self._processor_tile(tile.processor))

        return schematic

    def _display_tile(self, display: EntityPlacement) -> SchematicTile:
        x, y = display.position
        return SchematicTile(display.block_type, x, y)

    def _processor_tile(self, processor: EntityPlacement) -> SchematicTile:
        x, y = processor.position
        code = processor.program or ""
        self._check_flush_targets(processor, code)

        links = [(link.name, link.x - x, link.y - y) for link in processor.links]
        return SchematicTile(
            processor.block_type, x, y, config=encode_processor_config(code, links)
        )

    def _check_flush_targets(self, processor: EntityPlacement, code: str) -> None:
        link_names = {link.name for link in processor.links}
        for target in sorted(set(_FLUSH_TARGET.findall(code))):
            if target not in link_names:
                self.diagnostics.error(
                    f"Processor '{processor.entity_id}' flushes '{target}' but links only {sorted(link_names)}"
                )


def install_schematic(schematic: Schematic, directory: Path) -> Path:
    """Write ``schematic`` into a schematic catalog directory as ``<name>.msch``."""
    stem = _UNSAFE_FILENAME.sub("_", schematic.name).strip(" ._") or "schematic"
    return schematic.save(Path(directory) / f"{stem}.msch")
