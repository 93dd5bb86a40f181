"""Tests for material records."""

import dataclasses

import pytest

from imagefem.errors import TypeMismatch
from imagefem.pre.material import LinearElasticity, Material


class TestLinearElasticity:

    def test_defaults(self):
        material = LinearElasticity()
        assert material.youngs_modulus == 100.0
        assert material.poissons_ratio == 0.2
        assert material.thickness == 1.0

    def test_is_immutable(self, elasticity):
        with pytest.raises(dataclasses.FrozenInstanceError):
            elasticity.youngs_modulus = 1.0

    def test_keyword_only(self):
        with pytest.raises(TypeError):
            LinearElasticity("steel", 210e9)

    def test_to_dict(self, elasticity):
        data = elasticity.to_dict()
        assert data["type"] == "LinearElasticity"
        assert data["youngs_modulus"] == 3000.0
        assert Material.from_dict(data) == elasticity

    def test_from_dict_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown material type"):
            Material.from_dict({"type": "Concrete", "name": "C30/37"})


class TestTypedAccessor:

    def test_as_type(self, elasticity):
        assert elasticity.as_type(LinearElasticity) is elasticity
        assert elasticity.as_type(Material) is elasticity

    def test_as_type_mismatch(self):
        material = Material(name="opaque")
        with pytest.raises(TypeMismatch, match="'opaque' is a Material, not a LinearElasticity"):
            material.as_type(LinearElasticity)

    def test_type_mismatch_is_a_type_error(self):
        with pytest.raises(TypeError):
            Material().as_type(LinearElasticity)
