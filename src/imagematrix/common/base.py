"""
Base data models - fundamental types without dependencies.

This module contains basic Pydantic models used throughout the engine:
- Color: 8-bit RGB triple used as a filter parameter and region color

IMPORTANT: This module must NOT import from core, image, schemas or pipeline
to avoid circular dependencies.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Color(BaseModel):
    """8-bit RGB color."""

    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=255, description="Red channel")
    g: int = Field(..., ge=0, le=255, description="Green channel")
    b: int = Field(..., ge=0, le=255, description="Blue channel")

    @classmethod
    def from_tuple(cls, values: Sequence[int]) -> "Color":
        """Create color from an (r, g, b) or (r, g, b, a) sequence; alpha is ignored."""
        return cls(r=int(values[0]), g=int(values[1]), b=int(values[2]))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Color":
        """Create color from dictionary."""
        return cls(r=int(data.get("r", 0)), g=int(data.get("g", 0)), b=int(data.get("b", 0)))

    def to_tuple(self) -> Tuple[int, int, int]:
        """Convert to (r, g, b) tuple."""
        return (self.r, self.g, self.b)

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {"r": self.r, "g": self.g, "b": self.b}

    def distance_to(self, other: "Color") -> float:
        """Euclidean distance in RGB space."""
        return math.sqrt(
            (self.r - other.r) ** 2 + (self.g - other.g) ** 2 + (self.b - other.b) ** 2
        )

    def __str__(self) -> str:
        return f"RGB({self.r}, {self.g}, {self.b})"
