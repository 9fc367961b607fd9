"""Generation parameters for cartoon geometry.

A :class:`CartoonConfig` is fixed for the duration of one build.  Tuning
tools keep their own "current" record (start from :data:`DEFAULT_CONFIG`)
and pass a new value into the next rebuild.
"""

from __future__ import annotations
import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class CartoonConfig:
    # Cross-section sizes (Angstroms, full widths / thicknesses)
    coil_radius: float = 0.25
    helix_width: float = 2.0
    helix_thickness: float = 0.4
    sheet_width: float = 1.6
    sheet_thickness: float = 0.25
    superellipse_exponent: float = 4.0
    arrow_width: float = 2.4
    arrow_residues: float = 1.5
    min_profile_width: float = 0.05

    # Sampling
    subdivisions: int = 8
    profile_points: int = 16

    # Class-aware smoothing
    smooth_iterations: int = 5
    coil_smooth_weight: float = 0.15
    sheet_smooth_weight: float = 0.25

    # Helix idealization
    idealize_helices: bool = True
    min_helix_points: int = 4
    power_iterations: int = 100
    power_tolerance: float = 1e-10

    # Sheet flattening and arrow tips
    flatten_sheets: bool = True
    min_sheet_points: int = 3
    flatten_cycles: int = 3
    arrow_tip_span: int = 3
    tip_iterations: int = 4
    tip_pull: float = 0.5

    # Guide normals
    displacement_threshold: float = 0.1

    def __post_init__(self) -> None:
        positive = (
            "coil_radius", "helix_width", "helix_thickness", "sheet_width",
            "sheet_thickness", "superellipse_exponent", "arrow_width",
            "arrow_residues", "min_profile_width", "power_tolerance",
        )
        for name in positive:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        for name in ("coil_smooth_weight", "sheet_smooth_weight", "tip_pull"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value!r}")
        if self.subdivisions < 1:
            raise ValueError("subdivisions must be >= 1")
        if self.profile_points < 4:
            raise ValueError("profile_points must be >= 4")
        if self.min_helix_points < 4:
            raise ValueError("min_helix_points must be >= 4")
        if self.min_sheet_points < 3:
            raise ValueError("min_sheet_points must be >= 3")
        for name in ("smooth_iterations", "power_iterations", "flatten_cycles",
                     "arrow_tip_span", "tip_iterations"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.displacement_threshold < 0:
            raise ValueError("displacement_threshold must be >= 0")

    def replace(self, **overrides: Any) -> "CartoonConfig":
        """Return a copy with *overrides* applied."""
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_overrides(
        cls,
        overrides: Mapping[str, Any],
        base: "CartoonConfig | None" = None,
    ) -> "CartoonConfig":
        """Build a config from ``name -> value`` pairs.

        String values (as typed on a command line) are coerced to the
        field's type.
        """
        base = base if base is not None else DEFAULT_CONFIG
        types = {f.name: f.type for f in dataclasses.fields(cls)}
        coerced: dict[str, Any] = {}
        for name, value in overrides.items():
            if name not in types:
                raise ValueError(f"Unknown cartoon parameter: {name!r}")
            coerced[name] = _coerce(name, types[name], value)
        return dataclasses.replace(base, **coerced)


def _coerce(name: str, type_name: Any, value: Any) -> Any:
    # Annotations are strings under ``from __future__ import annotations``
    type_name = getattr(type_name, "__name__", type_name)
    if type_name == "bool":
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("1", "true", "yes", "on"):
                return True
            if lowered in ("0", "false", "no", "off"):
                return False
            raise ValueError(f"{name}: cannot interpret {value!r} as a boolean")
        return bool(value)
    try:
        if type_name == "int":
            return int(value)
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name}: invalid value {value!r}") from exc


DEFAULT_CONFIG = CartoonConfig()
