# -----------------------------------------------------------------------------
# Compiler: end-to-end pipeline for the smart numeric edit box
# Responsibilities:
#   • Own configuration (unit system, decimal point, fraction rendering)
#   • Tokenize → shunting-yard → evaluate → normalize
#   • Format solutions for display
#   • Optional tracing of every stage
# -----------------------------------------------------------------------------

# src/numedit/compiler.py
from __future__ import annotations
import logging
from typing import List, Optional

from .config import CompilerSettings, locale_decimal_point
from .evaluator import evaluate
from .formatter import format_solution
from .shunting_yard import to_postfix
from .tokenizer import scan
from .tracer import Tracer
from .types import Solution, Token, Unit, UnitSystem
from .units import UnitTable, normalize

logger = logging.getLogger(__name__)


class Compiler:
    """
    Expression compiler facade.

    Configuration changes only between calls; each eval/solve call works on
    local state and either returns a Solution or raises CompilerError.

    >>> c = Compiler()
    >>> c.set_unit_out(UnitSystem.IMPERIAL)
    >>> c.format(c.eval("3ft 6in"))
    '42in'
    """

    def __init__(self, settings: Optional[CompilerSettings] = None):
        settings = settings or CompilerSettings()
        self._decimal_point = settings.decimal_point
        self._imperial_fractions = settings.imperial_fractions
        self.table = UnitTable.for_system(settings.system)

    # ---------------- configuration ----------------

    def set_unit_out(self, system: UnitSystem) -> None:
        # Rebuild the whole unit table for the new system.
        self.table = UnitTable.for_system(system)
        logger.info("Unit system set to %s", system.value)

    def set_imperial_fractions(self, enabled: bool) -> None:
        self._imperial_fractions = enabled

    @property
    def unit_system(self) -> UnitSystem:
        return self.table.system

    @property
    def imperial_fractions(self) -> bool:
        return self._imperial_fractions

    @property
    def decimal_point(self) -> str:
        # Configured separator, else whatever the host locale uses right now.
        return self._decimal_point or locale_decimal_point()

    # ---------------- general use ----------------

    def eval(self, text: str, previous: Optional[Solution] = None,
             tracer: Optional[Tracer] = None) -> Solution:
        """Parse and solve `text`; `previous` supplies units for bare numbers."""
        tokens = self.parse(text)
        if tracer is not None:
            tracer.add("input", {"text": text, "system": self.unit_system.value})
            tracer.add_tokens("tokens", tokens)
        return self.solve(tokens, previous, tracer)

    def format(self, solution: Solution) -> str:
        return format_solution(solution, self.table, fractions=self._imperial_fractions,
                               decimal_point=self.decimal_point)

    def default_unit(self) -> Unit:
        return self.table.default_unit()

    def normalize(self, solution: Solution) -> Solution:
        return normalize(solution, self.table)

    # ---------------- low level access ----------------

    def parse(self, text: str) -> List[Token]:
        return scan(text, self.table, self.decimal_point)

    def solve(self, tokens: List[Token], previous: Optional[Solution] = None,
              tracer: Optional[Tracer] = None) -> Solution:
        postfix = to_postfix(tokens)
        if tracer is not None:
            tracer.add_tokens("postfix", postfix)
        result = evaluate(postfix, self.table, previous)
        result = normalize(result, self.table)
        if tracer is not None:
            tracer.add_solution("solution", result)
        logger.debug("Solved %d tokens → %r", len(tokens), result)
        return result
