# --- Smart Numeric Edit Box: Expression API (FastAPI) -------------------------
# Purpose: Minimal API that evaluates edit-box expressions ("3ft 6in + 2'")
# with the numedit compiler and returns the value, unit and display string.
# Each request gets its own Compiler, so requests share no mutable state.
# ------------------------------------------------------------------------------

from __future__ import annotations
import logging
from typing import Any, Dict, List, Literal, Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from numedit import Compiler, CompilerError, CompilerSettings, Solution, Unit, UnitSystem
from numedit.tracer import Tracer

# Load .env for external configuration (unit system, decimal point, log level)
load_dotenv()
_settings = CompilerSettings.from_env()
logger = logging.getLogger(__name__)

app = FastAPI(title="Smart Numeric Edit Box API")

SystemName = Literal["generic", "metric", "imperial"]

# ----------------------------- Schemas ----------------------------------------
class SolutionModel(BaseModel):
    # Wire form of a Solution: base-unit value plus display unit.
    value: float = Field(allow_inf_nan=False)
    scale: float = Field(1.0, gt=0, allow_inf_nan=False)
    system: SystemName = "generic"

    def to_solution(self) -> Solution:
        return Solution(self.value, Unit(self.scale, UnitSystem(self.system)))

class EvalRequest(BaseModel):
    input: str
    unit_system: Optional[SystemName] = None
    imperial_fractions: Optional[bool] = None
    previous: Optional[SolutionModel] = None
    trace: bool = False

class FormatRequest(BaseModel):
    solution: SolutionModel
    unit_system: Optional[SystemName] = None
    imperial_fractions: Optional[bool] = None

# ----------------------------- Helpers ----------------------------------------
def _compiler_for(unit_system: Optional[str], imperial_fractions: Optional[bool]) -> Compiler:
    """Build a Compiler from the env settings with per-request overrides."""
    overrides: Dict[str, Any] = {}
    if unit_system is not None:
        overrides["unit_system"] = unit_system
    if imperial_fractions is not None:
        overrides["imperial_fractions"] = imperial_fractions
    return Compiler(CompilerSettings(**{**_settings.model_dump(), **overrides}))

def _solution_payload(compiler: Compiler, solution: Solution) -> Dict[str, Any]:
    return {
        "value": solution.value,
        "magnitude": solution.magnitude,
        "scale": solution.units.scale,
        "system": solution.units.system.value,
        "unit": compiler.table.unit_name(solution.units),
        "display": compiler.format(solution),
    }

# ----------------------------- Routes -----------------------------------------
@app.get("/health")
def health(): return {"ok": True}

@app.post("/eval")
def eval_expression(req: EvalRequest):
    """
    Evaluate one edit-box expression.
    - `previous` carries the last result so bare numbers keep its unit.
    - Compiler errors come back as 422 with the failing stage.
    """
    compiler = _compiler_for(req.unit_system, req.imperial_fractions)
    tracer = Tracer() if req.trace else None
    previous = req.previous.to_solution() if req.previous else None
    try:
        result = compiler.eval(req.input, previous, tracer)
    except CompilerError as e:
        logger.info("Rejected %r: %s", req.input, e)
        body: Dict[str, Any] = {"ok": False, "stage": e.stage.value, "error": e.message}
        if tracer is not None:
            body["trace"] = tracer.steps()
        return JSONResponse(status_code=422, content=body)

    payload = {"ok": True, **_solution_payload(compiler, result)}
    if tracer is not None:
        payload["trace"] = tracer.steps()
    return payload

@app.post("/format")
def format_solution(req: FormatRequest):
    """Formatting only: render a Solution the way the edit box would."""
    compiler = _compiler_for(req.unit_system, req.imperial_fractions)
    return {"ok": True, **_solution_payload(compiler, req.solution.to_solution())}

@app.get("/units")
def list_units(unit_system: Optional[SystemName] = None) -> Dict[str, List[str]]:
    """Accepted unit spellings for a system, grouped by display name."""
    compiler = _compiler_for(unit_system, None)
    grouped: Dict[str, List[str]] = {}
    for alias, unit in compiler.table.units.items():
        grouped.setdefault(compiler.table.unit_name(unit), []).append(alias)
    return grouped
