import math
import random

import numpy as np
import pytest

from mavplan.utils import TrajectoryPoint, compute_path_length, rand_m_to_n


def _point(x, y, z):
    return TrajectoryPoint(position=[x, y, z])


def test_empty_path_has_zero_length():
    assert compute_path_length([]) == 0.0


def test_single_point_path_has_zero_length():
    assert compute_path_length([_point(1.0, 2.0, 3.0)]) == 0.0


def test_collinear_path_length_equals_endpoint_distance():
    path = [_point(0.0, 0.0, 0.0), _point(1.0, 1.0, 1.0), _point(2.0, 2.0, 2.0)]
    expected = float(np.linalg.norm(path[-1].position - path[0].position))
    assert compute_path_length(path) == pytest.approx(expected)


def test_path_length_is_sum_of_segments():
    a, b, c = _point(0, 0, 0), _point(3, 0, 0), _point(3, 4, 0)
    total = compute_path_length([a, b, c])
    assert total == pytest.approx(compute_path_length([a, b]) + compute_path_length([b, c]))
    assert total >= compute_path_length([a, c])


@pytest.mark.parametrize("yaw", [0.0, 0.5, -1.2, 3.0, -3.0])
def test_yaw_round_trip(yaw):
    point = TrajectoryPoint()
    point.set_from_yaw(yaw)
    assert point.yaw() == pytest.approx(yaw)
    assert np.linalg.norm(point.orientation) == pytest.approx(1.0)


def test_default_orientation_has_zero_yaw():
    assert TrajectoryPoint().yaw() == 0.0


def test_point_copies_input_vectors():
    source = np.array([1.0, 2.0, 3.0])
    point = TrajectoryPoint(position=source)
    source[0] = 99.0
    assert point.position[0] == 1.0


def test_rand_m_to_n_in_range():
    rng = random.Random(3)
    draws = [rand_m_to_n(-2.0, 5.0, rng) for _ in range(1000)]
    assert all(-2.0 <= d <= 5.0 for d in draws)


def test_rand_m_to_n_is_repeatable_with_seed():
    first = [rand_m_to_n(0.0, 1.0, random.Random(7)) for _ in range(3)]
    second = [rand_m_to_n(0.0, 1.0, random.Random(7)) for _ in range(3)]
    assert first == second


def test_rand_m_to_n_uses_module_random_when_no_generator():
    random.seed(11)
    a = rand_m_to_n(0.0, math.pi)
    random.seed(11)
    b = rand_m_to_n(0.0, math.pi)
    assert a == b
    assert 0.0 <= a <= math.pi