# -----------------------------------------------------------------------------
# Compiler configuration
# Purpose:
#   Typed settings for the expression compiler, loadable from the environment
#   (or a .env file) so the REPL and the API share one configuration path.
# Environment:
#   NUMEDIT_UNIT_SYSTEM         generic | metric | imperial   (default metric)
#   NUMEDIT_DECIMAL_POINT       single character; unset → host locale
#   NUMEDIT_IMPERIAL_FRACTIONS  true/false                     (default true)
#   NUMEDIT_LOG_LEVEL           logging level name             (default WARNING)
# -----------------------------------------------------------------------------

from __future__ import annotations
import locale
import logging
import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from .tokenizer import OPERATOR_CHARS, UNIT_CHARS
from .types import UnitSystem

_TRUTHY = {"1", "true", "yes", "on"}


def locale_decimal_point() -> str:
    # The host locale's decimal separator ("." under the C locale).
    return locale.localeconv().get("decimal_point") or "."


class CompilerSettings(BaseModel):
    unit_system: Literal["generic", "metric", "imperial"] = "metric"
    decimal_point: Optional[str] = None
    imperial_fractions: bool = True
    log_level: str = "WARNING"

    @field_validator("decimal_point")
    @classmethod
    def _single_separator(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        # must not collide with another token class
        if len(v) != 1 or v.isdigit() or v.isspace():
            raise ValueError("decimal_point must be one non-digit, non-space character")
        if v in OPERATOR_CHARS or v in UNIT_CHARS or v in "()":
            raise ValueError(f"decimal_point {v!r} is an operator, parenthesis or unit character")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def system(self) -> UnitSystem:
        return UnitSystem(self.unit_system)

    @staticmethod
    def from_env() -> "CompilerSettings":
        """
        Build settings from NUMEDIT_* variables, loading .env first if present.
        Unset variables keep the model defaults.
        """
        load_dotenv()
        data = {}
        if os.getenv("NUMEDIT_UNIT_SYSTEM"):
            data["unit_system"] = os.getenv("NUMEDIT_UNIT_SYSTEM").strip().lower()
        if os.getenv("NUMEDIT_DECIMAL_POINT"):
            data["decimal_point"] = os.getenv("NUMEDIT_DECIMAL_POINT")
        if os.getenv("NUMEDIT_IMPERIAL_FRACTIONS"):
            data["imperial_fractions"] = os.getenv("NUMEDIT_IMPERIAL_FRACTIONS").strip().lower() in _TRUTHY
        if os.getenv("NUMEDIT_LOG_LEVEL"):
            data["log_level"] = os.getenv("NUMEDIT_LOG_LEVEL")
        return CompilerSettings(**data)


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
