"""Parse tree transformer producing drawing instructions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union

from lark import Transformer

from display_compiler.src.imaging.rect_extractor import unpack_color


@dataclass(frozen=True)
class SetColor:
    rgba: Tuple[int, int, int, int]


@dataclass(frozen=True)
class DrawRect:
    """Rectangle in display space (origin bottom-left)."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class DrawFlush:
    target: str


Instruction = Union[SetColor, DrawRect, DrawFlush]


class ProgramTransformer(Transformer):
    """Transforms a Lark parse tree into instruction records."""

    def start(self, items) -> List[Instruction]:
        return list(items)

    def set_color(self, items) -> SetColor:
        r, g, b, a = (int(token) for token in items)
        return SetColor((r, g, b, a))

    def set_packed_color(self, items) -> SetColor:
        digits = str(items[0])[1:]
        if len(digits) == 6:
            digits += "ff"
        return SetColor(unpack_color(int(digits, 16)))

    def draw_rect(self, items) -> DrawRect:
        x, y, width, height = (int(token) for token in items)
        return DrawRect(x, y, width, height)

    def draw_flush(self, items) -> DrawFlush:
        return DrawFlush(str(items[0]))
