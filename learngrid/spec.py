"""Locations of attributes inside a data grid."""

from __future__ import annotations

from dataclasses import dataclass

from .attributes import Attribute


@dataclass(frozen=True)
class AttributeSpec:
    """Where an attribute lives in a grid: its storage group and column."""

    pond: int
    position: int
    attr: Attribute

    def __str__(self) -> str:
        return f"AttributeSpec(Attribute: '{self.attr}', Pond: {self.pond}/{self.position})"