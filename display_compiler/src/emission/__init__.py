from .emitter import Schematic, SchematicEmitter, SchematicTile, install_schematic
from .preview import render_preview
from .schematic_format import encode_processor_config, pack_position, unpack_position

__all__ = [
    # Main API
    "SchematicEmitter",
    "Schematic",
    "SchematicTile",
    "install_schematic",
    "render_preview",
    # Binary helpers
    "encode_processor_config",
    "pack_position",
    "unpack_position",
]
