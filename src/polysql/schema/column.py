"""
Normalized column descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import DataType


@dataclass(frozen=True)
class Column:
    """
    Engine-neutral description of one table column.

    ``max_length`` is only meaningful for length-bounded character types and is
    ``None`` otherwise.
    """

    name: str
    type: DataType
    max_length: int | None = None
    nullable: bool = True
    primary_key: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Column name is required.")
        if not isinstance(self.type, DataType):
            raise ValueError(f"Column '{self.name}' has invalid type {self.type!r}.")
        if self.max_length is not None and self.max_length < 0:
            raise ValueError(f"Column '{self.name}' has negative max_length.")
