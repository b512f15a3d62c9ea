import math

import pytest

from ivview.percent import Percent, PercentError


def pct(n):
    return Percent.from_integer_percent(n)


def test_from_integer_percent_scales_ints():
    assert pct(10) * 100 == 10
    assert 100 * pct(10) == 10


def test_multiplication_truncates_toward_zero():
    assert pct(50) * 3 == 1
    assert pct(99) * 1 == 0
    assert pct(50) * 3.0 == pytest.approx(1.5)


def test_try_from_float():
    assert Percent.try_from_float(1) == pct(100)
    assert Percent.try_from_float(0.5) == pct(50)
    for bad in (-1, -0.001, math.nan, math.inf):
        with pytest.raises(PercentError):
            Percent.try_from_float(bad)


def test_negative_integer_rejected():
    with pytest.raises(PercentError):
        pct(-1)


def test_addition_is_exact_and_subtraction_saturates():
    assert pct(50) + pct(50) == pct(100)
    assert pct(10) + pct(20) == pct(30)
    assert pct(0) - pct(20) == pct(0)
    assert pct(30) - pct(10) == pct(20)


@pytest.mark.parametrize("text,value", [("0%", 0), ("5%", 5), ("120%", 120)])
def test_parse_valid(text, value):
    assert Percent.parse(text) == pct(value)


@pytest.mark.parametrize("text", ["-20%", "20", "007%", "00%", "1.5%", " 5%", "5% ", "%", ""])
def test_parse_invalid(text):
    with pytest.raises(PercentError):
        Percent.parse(text)


@pytest.mark.parametrize("n", [0, 1, 10, 25, 100, 350])
def test_parse_format_round_trip(n):
    p = pct(n)
    assert str(p) == f"{n}%"
    assert Percent.parse(str(p)) == p


def test_fractional_percent_formats_with_two_decimals():
    assert str(Percent.try_from_float(1 / 3)) == "33.33%"


def test_step_next_and_prev():
    assert pct(50).step_next(pct(5), pct(25)) == pct(75)
    assert pct(28).step_prev(pct(25), pct(25)) == pct(25)


def test_step_quantizes_to_increment():
    assert pct(53).step_next(pct(10), pct(10)) == pct(60)
    assert pct(57).step_prev(pct(10), pct(10)) == pct(50)


def test_step_rounds_half_to_even():
    # 15 + 10 = 25 -> 2.5 steps -> 2 steps
    assert pct(15).step_next(pct(0), pct(10)) == pct(20)
    # 25 + 10 = 35 -> 3.5 steps -> 4 steps
    assert pct(25).step_next(pct(0), pct(10)) == pct(40)


def test_step_prev_never_below_min():
    assert pct(10).step_prev(pct(10), pct(25)) == pct(10)
    assert pct(0).step_prev(pct(0), pct(25)) == pct(0)


def test_zero_increment_returns_min():
    assert pct(40).step_next(pct(15), pct(0)) == pct(15)


@pytest.mark.parametrize("start", [0, 7, 25, 33, 50, 99, 130])
def test_step_up_then_down_stays_close(start):
    step = pct(10)
    p = pct(start)
    back = p.step_next(step, step).step_prev(step, step)
    assert back >= p - step
    assert back >= step


def test_ordering_and_hashing():
    assert pct(10) < pct(20) <= pct(20)
    assert max(pct(5), pct(50)) == pct(50)
    assert len({pct(10), pct(10), Percent.parse("10%")}) == 1


def test_float_conversion():
    assert float(pct(25)) == 0.25
