"""
BindingConfig schema.

The parsed, validated form of a binding configuration file. The loader
turns YAML into this type; ``QueryBinding`` consumes it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BindingConfig:
    """Settings shared by every bind call of a ``QueryBinding``."""

    tag_name: str = "form"  # Metadata key holding per-field key overrides
    keep_blank_values: bool = True  # "a=" yields [""] rather than nothing
    max_num_fields: int | None = None  # Upper bound on parsed query pairs

    def __post_init__(self) -> None:
        if not isinstance(self.tag_name, str):
            raise ValueError(f"tag_name must be a string, got {self.tag_name!r}")
        if not isinstance(self.keep_blank_values, bool):
            raise ValueError(
                f"keep_blank_values must be a boolean, got {self.keep_blank_values!r}"
            )
        if self.max_num_fields is not None and (
            isinstance(self.max_num_fields, bool)
            or not isinstance(self.max_num_fields, int)
            or self.max_num_fields < 1
        ):
            raise ValueError(
                f"max_num_fields must be a positive integer, got {self.max_num_fields!r}"
            )
