"""
Material Records
================
Defines the material records attached to generated elements.

The mesh generator never interprets a material; it stores one instance and
shares it across every element. Consumers needing concrete fields recover
them through :meth:`Material.as_type`, which fails loudly instead of
returning ``None``.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Type, TypeVar

from imagefem.errors import TypeMismatch

M = TypeVar("M", bound="Material")


@dataclass(frozen=True, kw_only=True)
class Material:
    """
    Base class for material records.

    Attributes:
        name: Human readable name of the material.
    """
    name: str = ""

    @property
    def type(self) -> str:
        """Name of the concrete material class."""
        return self.__class__.__name__

    def as_type(self, material_type: Type[M]) -> M:
        """
        Return this material typed as `material_type`.

        Args:
            material_type: Expected material class.

        Raises:
            TypeMismatch: If the material is not an instance of `material_type`.
        """
        if not isinstance(self, material_type):
            raise TypeMismatch(
                f"Material '{self.name}' is a {self.type}, not a {material_type.__name__}."
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Material:
        """
        Rebuild a material from the output of :meth:`to_dict`.

        Raises:
            ValueError: If the type is unknown.
        """
        data = dict(data)
        type_name = data.pop("type", Material.__name__)
        material_cls = _MATERIAL_TYPES.get(type_name)
        if material_cls is None:
            raise ValueError(f"Unknown material type: '{type_name}'.")
        known = {f.name for f in fields(material_cls)}
        return material_cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True, kw_only=True)
class LinearElasticity(Material):
    """
    Linear elastic material.

    Attributes:
        youngs_modulus: Young's modulus E.
        cross_sectional_area: Cross-sectional area A (beam/bar elements).
        moment_of_inertia: Moment of inertia I (beam elements).
        poissons_ratio: Poisson's ratio nu.
        thickness: Thickness h (plane/membrane elements).
        density_heat_product: Density times heat capacity (RhoC).
    """
    youngs_modulus: float = 100.0
    cross_sectional_area: float = 1.0
    moment_of_inertia: float = 1.0
    poissons_ratio: float = 0.2
    thickness: float = 1.0
    density_heat_product: float = 1.0


_MATERIAL_TYPES: Dict[str, Type[Material]] = {
    Material.__name__: Material,
    LinearElasticity.__name__: LinearElasticity,
}
