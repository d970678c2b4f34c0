import pytest

from mavplan.color import ColorRGBA, percent_to_rainbow_color


def test_zero_is_red():
    c = percent_to_rainbow_color(0.0)
    assert (c.r, c.g, c.b) == pytest.approx((1.0, 0.0, 0.0))


@pytest.mark.parametrize("h", [0.0, 0.1, 0.25, 0.4, 0.5, 0.66, 0.8, 0.99])
def test_components_in_range_and_fully_saturated(h):
    c = percent_to_rainbow_color(h)
    components = (c.r, c.g, c.b)
    assert all(0.0 <= x <= 1.0 for x in components)
    assert max(components) == 1.0
    assert min(components) == 0.0
    assert c.a == 0.5


@pytest.mark.parametrize("h", [0.1, 0.37, 0.9])
def test_periodic_in_whole_numbers(h):
    assert percent_to_rainbow_color(h) == percent_to_rainbow_color(h + 2.0)
    assert percent_to_rainbow_color(h) == percent_to_rainbow_color(h - 1.0)


def test_different_hues_differ():
    assert percent_to_rainbow_color(0.1) != percent_to_rainbow_color(0.6)


def test_non_finite_gives_fallback_colour():
    c = percent_to_rainbow_color(float("nan"))
    assert c == ColorRGBA(1.0, 0.5, 0.5, 0.5)