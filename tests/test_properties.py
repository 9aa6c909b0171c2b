import pytest
from hypothesis import given, strategies as st
from gpxmeasure.geometry import BoundingBox, GeoPoint, distance_between

# Strategy for valid GPS coordinates
valid_lat = st.floats(-90.0, 90.0)
valid_lon = st.floats(-180.0, 180.0)
valid_point = st.builds(GeoPoint, lat=valid_lat, lon=valid_lon)
point_lists = st.lists(valid_point, min_size=1, max_size=20)


def contains(box: BoundingBox, point: GeoPoint) -> bool:
    return (
        box.bottom_right.lat <= point.lat <= box.top_left.lat
        and box.top_left.lon <= point.lon <= box.bottom_right.lon
    )


class TestDistanceProperties:

    @given(valid_point, valid_point)
    def test_distance_is_non_negative(self, p1, p2):
        """Distance between any two points is always non-negative."""
        assert distance_between(p1.lat, p1.lon, p2.lat, p2.lon) >= 0

    @given(valid_point)
    def test_distance_to_self_is_zero(self, p):
        """Distance from a point to itself is always zero."""
        assert distance_between(p.lat, p.lon, p.lat, p.lon) == 0

    @given(valid_point, valid_point)
    def test_distance_is_symmetric(self, p1, p2):
        """Distance from A to B equals distance from B to A."""
        assert distance_between(p1.lat, p1.lon, p2.lat, p2.lon) == distance_between(
            p2.lat, p2.lon, p1.lat, p1.lon
        )


class TestBoundingBoxProperties:

    @given(point_lists)
    def test_box_contains_all_points(self, points):
        """The box built from a set of points contains every one of them."""
        box = BoundingBox.from_points(points)
        assert box.is_set()
        for point in points:
            assert contains(box, point)

    @given(point_lists)
    def test_centre_inside_box(self, points):
        box = BoundingBox.from_points(points)
        assert contains(box, box.centre())

    @given(point_lists, point_lists)
    def test_merge_equals_box_of_union(self, points_a, points_b):
        """Merging two boxes gives the box of all points of both."""
        merged = BoundingBox.from_points(points_a).merge(BoundingBox.from_points(points_b))
        assert merged == BoundingBox.from_points(points_a + points_b)

    @given(point_lists, point_lists)
    def test_merge_is_commutative(self, points_a, points_b):
        a = BoundingBox.from_points(points_a)
        b = BoundingBox.from_points(points_b)
        assert a.merge(b) == b.merge(a)

    @given(point_lists)
    def test_merge_with_unset_is_identity(self, points):
        box = BoundingBox.from_points(points)
        assert box.merge(BoundingBox()) == box
        assert BoundingBox().merge(box) == box
