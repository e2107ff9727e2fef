from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

STANDARDS_DIR = Path(__file__).resolve().parents[1] / "resources" / "standards"

# "manual" selects the reduced-capability rounding path, which needs no
# floating-point rounding primitive.
ROUNDING: Literal["native", "manual"] = "native"


@dataclass(frozen=True)
class NumericConfig:
    rounding: Literal["native", "manual"] = ROUNDING
    standard_pack: Path = field(default=STANDARDS_DIR / "us_epa.yaml")


DEFAULT_CONFIG = NumericConfig()
