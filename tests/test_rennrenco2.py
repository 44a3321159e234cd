"""Test for the weighted energy triple."""

# clean

import pytest

from epbdcalc.rennrenco2 import RenNrenCo2


@pytest.mark.base
def test_rennrenco2_arithmetic():
    """Addition, subtraction and scaling are elementwise."""
    first = RenNrenCo2(1.0, 2.0, 3.0)
    second = RenNrenCo2(0.5, 1.0, 0.25)

    assert first + second == RenNrenCo2(1.5, 3.0, 3.25)
    assert first - second == RenNrenCo2(0.5, 1.0, 2.75)
    assert first * 2.0 == RenNrenCo2(2.0, 4.0, 6.0)
    assert 2.0 * first == RenNrenCo2(2.0, 4.0, 6.0)
    assert -first == RenNrenCo2(-1.0, -2.0, -3.0)
    assert first + RenNrenCo2.zero() == first


@pytest.mark.base
def test_rennrenco2_totals():
    """Total primary energy and renewable ratio."""
    value = RenNrenCo2(1.0, 3.0, 10.0)
    assert value.tot() == pytest.approx(4.0)
    assert value.rer() == pytest.approx(0.25)
    assert RenNrenCo2.zero().rer() == 0.0


@pytest.mark.base
def test_rennrenco2_json():
    """The triple is serialized with its three values."""
    value = RenNrenCo2.from_json(RenNrenCo2(0.414, 1.954, 0.331).to_json())  # type: ignore
    assert value == RenNrenCo2(0.414, 1.954, 0.331)
    assert str(value) == "ren: 0.414, nren: 1.954, co2: 0.331"
