import unittest

from regionmap.domain.geometry import (
    MapPoint,
    collection_bounds,
    perpendicular_distance,
    polygon_feature,
    simplify,
)
from tests.helpers import square_feature


def pts(*pairs):
    return [MapPoint(x, y) for x, y in pairs]


class TestPerpendicularDistance(unittest.TestCase):

    def test_distance_to_horizontal_line(self):
        d = perpendicular_distance(MapPoint(1, 2), MapPoint(0, 0), MapPoint(4, 0))
        self.assertAlmostEqual(d, 2.0)

    def test_distance_uses_the_infinite_line(self):
        d = perpendicular_distance(MapPoint(10, 3), MapPoint(0, 0), MapPoint(4, 0))
        self.assertAlmostEqual(d, 3.0)

    def test_zero_length_segment_falls_back_to_point_distance(self):
        d = perpendicular_distance(MapPoint(3, 4), MapPoint(0, 0), MapPoint(0, 0))
        self.assertAlmostEqual(d, 5.0)


class TestSimplify(unittest.TestCase):

    def test_two_points_or_fewer_are_returned_unchanged(self):
        for points in ([], pts((0, 0)), pts((0, 0), (5, 5))):
            self.assertEqual(simplify(points, 0.1), points)

    def test_collinear_points_collapse_to_endpoints(self):
        points = pts((0, 0), (1, 0), (2, 0), (3, 0), (4, 0))
        self.assertEqual(simplify(points, 0.001), pts((0, 0), (4, 0)))

    def test_points_within_tolerance_are_dropped(self):
        points = pts((0, 0), (1, 0.0004), (2, -0.0003), (3, 0))
        self.assertEqual(simplify(points, 0.001), pts((0, 0), (3, 0)))

    def test_corners_of_a_rough_square_survive(self):
        points = pts(
            (0, 0), (0.5, 0.0001), (1, 0),
            (1.0001, 0.5), (1, 1),
            (0.5, 1.0001), (0, 1),
            (0.0001, 0.5), (0, 0.01),
        )
        result = simplify(points, 0.001)
        for corner in pts((1, 0), (1, 1), (0, 1)):
            self.assertIn(corner, result)
        self.assertLess(len(result), len(points))

    def test_endpoints_are_preserved(self):
        points = pts((0, 0), (1, 5), (2, -3), (3, 8), (4, 0.5))
        for epsilon in (0.0, 0.5, 2.0, 100.0):
            result = simplify(points, epsilon)
            self.assertEqual(result[0], points[0])
            self.assertEqual(result[-1], points[-1])

    def test_simplification_is_idempotent(self):
        samples = [
            pts((0, 0), (1, 5), (2, -3), (3, 8), (4, 0.5)),
            pts((0, 0), (0.2, 0.1), (0.4, 0.0), (0.6, 0.3), (1, 1), (1.2, 0.9), (2, 0)),
            pts((5, 5), (5, 5), (5, 5.0001), (6, 6)),
        ]
        for points in samples:
            for epsilon in (0.001, 0.25, 1.0):
                once = simplify(points, epsilon)
                self.assertEqual(simplify(once, epsilon), once)

    def test_long_gesture_does_not_hit_recursion_limit(self):
        # Every vertex of a zigzag survives.
        points = [MapPoint(i * 0.01, (i % 2) * 0.5) for i in range(1500)]
        result = simplify(points, 0.001)
        self.assertEqual(len(result), len(points))

    def test_input_is_not_modified(self):
        points = pts((0, 0), (1, 0), (2, 0))
        simplify(points, 0.1)
        self.assertEqual(points, pts((0, 0), (1, 0), (2, 0)))


class TestGeoJSONHelpers(unittest.TestCase):

    def test_polygon_feature_closes_the_ring(self):
        feature = polygon_feature(pts((0, 0), (1, 0), (1, 1)))
        ring = feature["geometry"]["coordinates"][0]
        self.assertEqual(feature["geometry"]["type"], "Polygon")
        self.assertEqual(ring, [[0, 0], [1, 0], [1, 1], [0, 0]])

    def test_polygon_feature_keeps_an_already_closed_ring(self):
        feature = polygon_feature(pts((0, 0), (1, 0), (1, 1), (0, 0)))
        self.assertEqual(len(feature["geometry"]["coordinates"][0]), 4)

    def test_collection_bounds_covers_all_features(self):
        features = [square_feature(0, 0, 1), square_feature(5, -2, 2), {"type": "Feature", "geometry": None}]
        self.assertEqual(collection_bounds(features), (0.0, -2.0, 7.0, 1.0))

    def test_collection_bounds_of_nothing_is_none(self):
        self.assertIsNone(collection_bounds([]))


if __name__ == "__main__":
    unittest.main()
