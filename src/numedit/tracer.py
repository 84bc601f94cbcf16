# -----------------------------------------------------------------------------
# Tracing utility
# Purpose:
#   Lightweight, append-only trace collector recording each compiler stage
#   (tokens, postfix stream, solution). Produces a JSON-friendly list suitable
#   for API responses and debugging.
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Dict, Any

from .types import Solution, Token

@dataclass
class TraceStep:
    # One trace record with a short 'kind' label and free-form structured detail.
    kind: str
    detail: Dict[str, Any]

class Tracer:
    def __init__(self): self._steps: List[TraceStep] = []
    def add(self, kind: str, detail: Dict[str, Any]): self._steps.append(TraceStep(kind, detail))
    def __len__(self) -> int: return len(self._steps)

    def add_tokens(self, kind: str, tokens: List[Token]):
        self.add(kind, {"tokens": [
            {"position": t.position, "kind": t.kind.value, "text": t.text, "value": t.value}
            for t in tokens
        ]})

    def add_solution(self, kind: str, solution: Solution):
        self.add(kind, {"value": solution.value, "scale": solution.units.scale,
                        "system": solution.units.system.value})

    def steps(self) -> List[Dict[str, Any]]:
        # Export in plain dict form for easy JSON serialization.
        return [{"kind": s.kind, "detail": s.detail} for s in self._steps]
