from .compiler import Compiler
from .config import CompilerSettings
from .types import CompilerError, Solution, Stage, Token, TokenKind, Unit, UnitSystem

__all__ = [
    "Compiler",
    "CompilerError",
    "CompilerSettings",
    "Solution",
    "Stage",
    "Token",
    "TokenKind",
    "Unit",
    "UnitSystem",
]
