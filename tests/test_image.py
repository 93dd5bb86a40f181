"""Tests for ImageDescriptor."""

import numpy as np
import pytest

from imagefem.errors import InvalidConfiguration
from imagefem.pre.image import ImageDescriptor


class TestImageDescriptor:

    def test_defaults(self):
        image = ImageDescriptor(size=(20, 10))
        assert image.dimension == 2
        assert image.spacing == (1.0, 1.0)
        assert image.origin == (0.0, 0.0)
        np.testing.assert_array_equal(image.direction, np.eye(2))
        assert image.number_of_pixels == 200

    def test_from_array_reverses_shape(self):
        image = ImageDescriptor.from_array(np.zeros((5, 7, 9)), spacing=(0.5, 1.0, 2.0))
        assert image.size == (9, 7, 5)
        assert image.spacing == (0.5, 1.0, 2.0)

    def test_transform_index_to_physical_point(self):
        image = ImageDescriptor(size=(20, 20), spacing=(0.5, 2.0), origin=(1.0, -1.0))
        np.testing.assert_allclose(image.transform_index_to_physical_point([4, 3]), [3.0, 5.0])

    def test_transform_many_indices(self):
        image = ImageDescriptor(size=(20, 20), spacing=(2.0, 2.0))
        points = image.transform_index_to_physical_point([[0, 0], [1, 0], [0, 1]])
        np.testing.assert_allclose(points, [[0.0, 0.0], [2.0, 0.0], [0.0, 2.0]])

    def test_direction_rotates_axes(self):
        rotation = np.array([[0.0, -1.0], [1.0, 0.0]])
        image = ImageDescriptor(size=(10, 10), direction=rotation)
        np.testing.assert_allclose(image.transform_index_to_physical_point([1, 0]), [0.0, 1.0])

    def test_is_read_only(self):
        image = ImageDescriptor(size=(10, 10))
        with pytest.raises(AttributeError):
            image.size = (5, 5)
        with pytest.raises(ValueError):
            image.direction[0, 0] = 2.0

    @pytest.mark.parametrize("kwargs, message", [
        ({"size": ()}, "at least one axis"),
        ({"size": (10, 0)}, "at least 1"),
        ({"size": (10, 10), "spacing": (1.0, 0.0)}, "positive"),
        ({"size": (10, 10), "spacing": (1.0,)}, "entries"),
        ({"size": (10, 10), "origin": (0.0, 0.0, 0.0)}, "entries"),
        ({"size": (10, 10), "direction": np.eye(3)}, "2x2"),
        ({"size": (20.9, 20)}, "integral"),
        ({"size": (True, 20)}, "integral"),
        ({"size": (10, 10), "spacing": (float("nan"), 1.0)}, "positive and finite"),
        ({"size": (10, 10), "spacing": (1.0, float("inf"))}, "positive and finite"),
        ({"size": (10, 10), "origin": (float("nan"), 0.0)}, "Origin must be finite"),
        ({"size": (10, 10), "direction": [[1.0, 0.0], [0.0, float("nan")]]}, "Direction must be finite"),
    ])
    def test_invalid_descriptor(self, kwargs, message):
        with pytest.raises(InvalidConfiguration, match=message):
            ImageDescriptor(**kwargs)

    def test_numpy_integer_size_is_accepted(self):
        image = ImageDescriptor(size=(np.int64(20), np.int32(10)))
        assert image.size == (20, 10)
        assert all(type(s) is int for s in image.size)


class TestImageDescriptorEquality:

    def test_equal_descriptors(self):
        a = ImageDescriptor(size=(10, 10), spacing=(0.5, 0.5))
        b = ImageDescriptor(size=(10, 10), spacing=(0.5, 0.5), direction=np.eye(2))
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_direction_takes_part_in_equality(self):
        identity = ImageDescriptor(size=(10, 10))
        swapped = ImageDescriptor(size=(10, 10), direction=[[0.0, 1.0], [1.0, 0.0]])
        assert identity != swapped
        assert not np.allclose(
            identity.transform_index_to_physical_point([1, 0]),
            swapped.transform_index_to_physical_point([1, 0]),
        )

    def test_negative_zero_direction_hashes_like_zero(self):
        a = ImageDescriptor(size=(10, 10), direction=[[1.0, 0.0], [0.0, 1.0]])
        b = ImageDescriptor(size=(10, 10), direction=[[1.0, -0.0], [-0.0, 1.0]])
        assert a == b
        assert hash(a) == hash(b)

    def test_not_equal_to_other_types(self):
        assert ImageDescriptor(size=(10, 10)) != (10, 10)
