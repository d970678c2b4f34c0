from mavplan.color import ColorRGBA, percent_to_rainbow_color
from mavplan.recolor import TrajectoryRecolor
from mavplan.visualization import Marker


def _markers(n):
    return [Marker(ns="path", color=ColorRGBA(0, 0, 0, 1), scale=(1, 1, 1)) for _ in range(n)]


def test_markers_are_recoloured_and_numbered():
    node = TrajectoryRecolor()
    incoming = _markers(3)
    cache = node.marker_callback(incoming)
    assert [m.id for m in cache] == [0, 1, 2]
    assert all(m.scale == (0.025, 0.025, 0.025) for m in cache)
    assert all(m.color.a == 0.5 for m in cache)
    first = percent_to_rainbow_color(0.0)
    assert (cache[0].color.r, cache[0].color.g, cache[0].color.b) == (first.r, first.g, first.b)
    assert incoming[0].color.a == 1
    assert incoming[0].scale == (1, 1, 1)


def test_cache_accumulates_and_is_published():
    published = []
    node = TrajectoryRecolor(publish=published.append)
    node.marker_callback(_markers(2))
    node.marker_callback(_markers(1))
    assert len(published) == 2
    assert len(published[-1]) == 3
    assert [m.id for m in published[-1]] == [0, 1, 2]


def test_counter_wraps_after_exceeding_max_plans():
    node = TrajectoryRecolor(max_plans=4)
    node.marker_callback(_markers(5))
    assert node.counter == 5 % 4
    cache = node.marker_callback(_markers(1))
    assert cache[-1].id == 5 % 4


def test_counter_not_wrapped_at_exactly_max_plans():
    node = TrajectoryRecolor(max_plans=4)
    node.marker_callback(_markers(4))
    assert node.counter == 4
    cache = node.marker_callback(_markers(1))
    assert cache[-1].id == 4