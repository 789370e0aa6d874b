from .parser import BlockSummary, ProgramParser, summarize_block, summarize_program
from .transformer import DrawFlush, DrawRect, Instruction, SetColor

__all__ = [
    "ProgramParser",
    "BlockSummary",
    "summarize_block",
    "summarize_program",
    "Instruction",
    "SetColor",
    "DrawRect",
    "DrawFlush",
]
