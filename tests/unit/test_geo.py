"""
Unit tests for distance helpers.
"""
import pytest

from dispatch.geo import Coordinate, distance_km, locate, rank_by_distance

pytestmark = pytest.mark.unit

MASTER_CANTEEN = Coordinate(20.2663, 85.8430)
PATIA = Coordinate(20.3538, 85.8197)


class TestDistance:

    def test_zero_for_identical_points(self):
        assert distance_km(MASTER_CANTEEN, MASTER_CANTEEN) == 0

    def test_symmetric(self):
        assert distance_km(MASTER_CANTEEN, PATIA) == distance_km(PATIA, MASTER_CANTEEN)

    def test_bhubaneswar_reference(self):
        assert distance_km(MASTER_CANTEEN, PATIA) == pytest.approx(10.03, abs=0.1)

    def test_point_ten_km_north(self):
        assert distance_km((20.2961, 85.8245), (20.3861, 85.8245)) == pytest.approx(10.01, abs=0.01)

    def test_rounded_to_two_places(self):
        d = distance_km((20.0, 85.0), (20.0123, 85.0456))
        assert d == round(d, 2)


class TestRanking:

    def test_ascending_order(self):
        points = [(20.30, 85.82), (20.2963, 85.8245), (20.35, 85.82)]
        ranked = rank_by_distance((20.2961, 85.8245), points)
        assert [r.item for r in ranked] == [points[1], points[0], points[2]]
        assert [r.distance_km for r in ranked] == sorted(r.distance_km for r in ranked)

    def test_ties_keep_input_order(self):
        points = [{'name': 'a', 'latitude': 20.30, 'longitude': 85.82},
                  {'name': 'b', 'latitude': 20.30, 'longitude': 85.82}]
        ranked = rank_by_distance((20.2961, 85.8245), points)
        assert [r.item['name'] for r in ranked] == ['a', 'b']

    def test_restartable(self):
        points = [(20.30, 85.82), (20.31, 85.82)]
        ranked = rank_by_distance((20.2961, 85.8245), points)
        assert list(ranked) == list(ranked)

    def test_empty_input(self):
        assert rank_by_distance((20.0, 85.0), []) == []

    def test_custom_locator(self):
        items = [{'lat': 20.31, 'lng': 85.82}, {'lat': 20.30, 'lng': 85.82}]
        ranked = rank_by_distance((20.2961, 85.8245), items, locate=lambda i: (i['lat'], i['lng']))
        assert ranked[0].item == items[1]

    def test_locate_reads_attributes(self):
        class Spot:
            latitude = 20.1
            longitude = 85.1
        assert locate(Spot()) == Coordinate(20.1, 85.1)
