"""
Base schema for transform parameters.

Provides the base class shared by every transform parameter model.
"""

from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict

from imagematrix.common.enums import TransformKind


class BaseTransformParams(BaseModel):
    """
    Base class for all transform parameter models.

    Provides common functionality including:
    - the transform kind each model selects
    - to_dict() method with enum conversion
    - Consistent configuration (unknown fields rejected, immutable)

    Every transform kind has exactly one parameter model, so a step is
    fully described by its parameters.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, use_enum_values=False)

    kind: ClassVar[TransformKind]

    def to_dict(self) -> Dict[str, Any]:
        """
        Export parameters to dictionary.

        Enum values are converted to strings and nested models to dicts.

        Returns:
            Dictionary including a "kind" entry
        """
        data = self.model_dump(mode="json", exclude_none=True)
        data["kind"] = self.kind.value
        return data

    def describe(self) -> str:
        """Short human-readable label, e.g. "threshold(threshold=128)"."""
        fields = self.model_dump(exclude_none=True)
        args = ", ".join(f"{key}={value}" for key, value in fields.items())
        return f"{self.kind.value}({args})"
