"""Runtime settings shared by every conversion performed by a converter."""

from __future__ import annotations

import codecs

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConverterSettings(BaseModel):
    """Tunables for a `StructConverter` (immutable once built)."""

    max_depth: int = Field(
        64,
        ge=1,
        description="Maximum nesting of composite values before giving up.",
    )
    default_tag_name: str = Field(
        "",
        description=(
            "Metadata tag consulted by `convert_structs` when the caller "
            "passes no tag name; empty disables tag matching."
        ),
    )
    lossy_numeric: bool = Field(
        True,
        description=(
            "Allow narrowing numeric coercions (float → int truncation, "
            "complex/Decimal → float)."
        ),
    )
    text_bytes: bool = Field(
        True, description="Allow str ↔ bytes coercion using `encoding`."
    )
    encoding: str = Field(
        "utf-8", description="Codec used by the str ↔ bytes coercion."
    )

    model_config = ConfigDict(extra="forbid", frozen=True)

    # ----- validators --------------------------------------------------------
    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding '{v}'") from exc
        return v
