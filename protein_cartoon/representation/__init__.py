"""Representation variants sharing the build / recolour / show-hide contract."""

from __future__ import annotations

from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.representation.base import Representation
from protein_cartoon.representation.cartoon import CartoonRepresentation
from protein_cartoon.structure.models import Structure

REPRESENTATIONS: dict[str, type[Representation]] = {
    "cartoon": CartoonRepresentation,
}


def make_representation(
    kind: str,
    structure: Structure,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> Representation:
    try:
        cls = REPRESENTATIONS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown representation: {kind!r}. "
            f"Use one of {sorted(REPRESENTATIONS)}."
        ) from None
    return cls(structure, config)


__all__ = [
    "CartoonRepresentation",
    "REPRESENTATIONS",
    "Representation",
    "make_representation",
]
