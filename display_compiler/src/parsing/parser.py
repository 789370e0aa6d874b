"""Parser for generated display programs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from lark import Lark
from lark.exceptions import LarkError

from .transformer import DrawFlush, DrawRect, Instruction, ProgramTransformer, SetColor

_BLOCK_SEPARATOR = re.compile(r"\r?\n[ \t]*\r?\n\s*")


class ProgramParser:
    """Parse program blobs produced by the code generator back into blocks."""

    def __init__(self, grammar_path: Optional[Path] = None):
        """Initialize parser with grammar file."""
        if grammar_path is None:
            grammar_path = (
                Path(__file__).resolve().parent.parent.parent
                / "grammar"
                / "draw_program.lark"
            )

        self.grammar_path = grammar_path
        self.parser = None
        self._load_grammar()

    def _load_grammar(self) -> None:
        """Load and compile the Lark grammar."""
        try:
            with open(self.grammar_path, "r") as handle:
                grammar_text = handle.read()
        except FileNotFoundError as exc:
            raise FileNotFoundError(
                f"Grammar file not found: {self.grammar_path}"
            ) from exc

        self.parser = Lark(
            grammar_text,
            parser="lalr",
            transformer=ProgramTransformer(),
            start="start",
        )

    def parse_block(self, text: str) -> List[Instruction]:
        """Parse one block (no blank lines) into instructions.

        Raises:
            SyntaxError: If the block contains anything but drawing instructions
        """
        try:
            return self.parser.parse(text)
        except LarkError as exc:
            raise SyntaxError(f"Parse error in program block: {exc}") from exc

    def parse(self, program: str) -> List[List[Instruction]]:
        """Split ``program`` on blank lines and parse every block."""
        program = program.strip()
        if not program:
            return []
        return [self.parse_block(chunk) for chunk in _BLOCK_SEPARATOR.split(program)]


@dataclass(frozen=True)
class BlockSummary:
    """Resource usage of one parsed block."""

    lines: int
    non_flush_lines: int
    max_draw_calls: int
    flush_targets: tuple


def summarize_block(block: List[Instruction]) -> BlockSummary:
    """Count lines and the largest run of draw calls between flushes."""
    draw_calls = 0
    max_draw_calls = 0
    targets = []
    for instruction in block:
        if isinstance(instruction, DrawFlush):
            targets.append(instruction.target)
            draw_calls = 0
            continue
        if isinstance(instruction, (SetColor, DrawRect)):
            draw_calls += 1
            max_draw_calls = max(max_draw_calls, draw_calls)

    return BlockSummary(
        lines=len(block),
        non_flush_lines=len(block) - len(targets),
        max_draw_calls=max_draw_calls,
        flush_targets=tuple(targets),
    )


def summarize_program(blocks: List[List[Instruction]]) -> List[BlockSummary]:
    return [summarize_block(block) for block in blocks]
