"""Test for the building energy performance."""

# clean

import json

import pytest

from epbdcalc.balance.energy_performance import (
    GlobalAggregator,
    calculate,
    energy_performance,
    resolve_wfactors,
)
from epbdcalc.calculation_config import CalculationConfig
from epbdcalc.components import Components, Prod
from epbdcalc.energytypes import Carrier, Dest, ProdSource, Service, Source, Step
from epbdcalc.errors import MissingFactor, WrongInput
from epbdcalc.factor_resolver import FactorResolver
from epbdcalc.factors import UserWF
from epbdcalc.metadata import Meta
from epbdcalc.rennrenco2 import RenNrenCo2
from tests import functions_for_testing as fft


def get_electricity_and_gas_components() -> Components:
    """Heating and DHW with electricity, heating with natural gas."""
    return fft.get_components(
        fft.used(Carrier.ELECTRICIDAD, Service.CAL, 10.0),
        fft.used(Carrier.ELECTRICIDAD, Service.ACS, 5.0, component_id=2),
        fft.used(Carrier.GASNATURAL, Service.CAL, 20.0, component_id=3),
    )


def compute(components: Components, arearef: float = 1.0, k_exp: float = 0.0):
    """Energy performance with normalized peninsula factors."""
    factors = FactorResolver.normalize(fft.get_peninsula_factors(), components=components)
    return energy_performance(components, factors, k_exp, arearef)


@pytest.mark.base
def test_aggregation_is_sum_of_carriers():
    """Building totals are the sum of the carrier balances."""
    result = compute(get_electricity_and_gas_components())
    balance = result.balance

    assert set(result.balance_cr) == {Carrier.ELECTRICIDAD, Carrier.GASNATURAL}
    assert balance.used.epus == pytest.approx(480.0)
    assert balance.used.epus_by_srv[Service.CAL] == pytest.approx(360.0)
    assert balance.used.epus_by_srv[Service.ACS] == pytest.approx(60.0)
    assert balance.used.epus_by_cr[Carrier.GASNATURAL] == pytest.approx(240.0)
    assert balance.used.epus_by_cr_by_srv[Service.CAL][Carrier.ELECTRICIDAD] == pytest.approx(120.0)
    assert balance.delivered.grid_by_cr[Carrier.ELECTRICIDAD] == pytest.approx(180.0)
    fft.assert_triple(balance.weighted.b, RenNrenCo2(75.72, 637.32, 120.06))

    carrier_sum = RenNrenCo2.zero()
    for carrier_balance in result.balance_cr.values():
        carrier_sum = carrier_sum + carrier_balance.weighted.b
    fft.assert_triple(balance.weighted.b, carrier_sum)

    services_sum = balance.weighted.b_by_srv[Service.CAL] + balance.weighted.b_by_srv[Service.ACS]
    fft.assert_triple(services_sum, balance.weighted.b)


@pytest.mark.base
def test_balance_by_area():
    """Values by reference area are the absolute values divided by the area."""
    components = get_electricity_and_gas_components()
    components.cmeta.append(Meta("CTE_NEEDS_CAL", "1000.0"))
    result = compute(components, arearef=100.0)

    fft.assert_triple(result.balance_m2.weighted.b, RenNrenCo2(0.7572, 6.3732, 1.2006))
    assert result.balance_m2.used.epus == pytest.approx(result.balance.used.epus / 100.0)
    assert result.balance_m2.used.epus_by_srv[Service.ACS] == pytest.approx(0.6)
    assert result.balance_m2.needs.CAL == pytest.approx(10.0)
    assert result.balance_m2.needs.ACS is None
    fft.assert_triple(
        result.balance_m2.weighted.b_by_srv[Service.CAL], result.balance.weighted.b_by_srv[Service.CAL] * 0.01
    )
    assert result.balance.normalize_by_area(0.0).used.epus == 0.0


@pytest.mark.base
def test_reference_area_must_be_positive():
    """A zero or almost zero reference area is rejected."""
    components = get_electricity_and_gas_components()
    with pytest.raises(WrongInput):
        compute(components, arearef=0.0)
    with pytest.raises(WrongInput):
        compute(components, arearef=1e-3)


@pytest.mark.base
def test_missing_factor_aborts_calculation():
    """A carrier without factors aborts the whole calculation."""
    components = get_electricity_and_gas_components()
    factors = FactorResolver.normalize(fft.get_peninsula_factors())
    components.cdata.append(fft.used(Carrier.GASOLEO, Service.ACS, 1.0, component_id=4))
    with pytest.raises(MissingFactor):
        GlobalAggregator().aggregate(components, factors, 0.0, 1.0)


@pytest.mark.base
def test_renewable_energy_ratios():
    """Distant and near-by ratios with biomass and grid electricity."""
    components = fft.get_components(
        fft.used(Carrier.ELECTRICIDAD, Service.CAL, 10.0),
        fft.used(Carrier.BIOMASA, Service.CAL, 10.0, component_id=2),
    )
    result = compute(components)

    assert result.rer == pytest.approx(170.04 / 408.6)
    assert result.rer_nrb == pytest.approx(120.36 / 408.6)
    assert result.rer_onst == 0.0
    assert result.rer_nrb <= result.rer


@pytest.mark.base
def test_renewable_energy_ratio_onsite():
    """On-site electricity counts in the three perimeters."""
    components = fft.get_components(
        fft.used(Carrier.ELECTRICIDAD, Service.CAL, 10.0),
        fft.produced(ProdSource.EL_INSITU, 4.0),
    )
    result = compute(components)

    assert result.rer == pytest.approx(77.808 / 218.496)
    assert result.rer_nrb == pytest.approx(48.0 / 218.496)
    assert result.rer_onst == pytest.approx(48.0 / 218.496)


@pytest.mark.base
def test_renewable_energy_ratio_without_energy_use():
    """Components without energy use give zero ratios."""
    result = compute(fft.get_components())
    assert result.rer == 0.0
    assert result.rer_nrb == 0.0
    assert not result.balance_cr


@pytest.mark.base
def test_calculate_with_cogeneration():
    """Cogeneration input is delivered energy and exported cogenerated electricity is credited."""
    components = fft.get_components(
        fft.used(Carrier.ELECTRICIDAD, Service.CAL, 20.0),
        fft.produced(ProdSource.EL_COGEN, 40.0, component_id=2),
        fft.used(Carrier.GASNATURAL, Service.COGEN, 100.0, component_id=3),
    )
    result = calculate(components, fft.get_peninsula_factors())

    assert result.balance.used.cgnus == pytest.approx(1200.0)
    assert result.balance.exported.grid == pytest.approx(240.0)
    assert result.balance_cr[Carrier.GASNATURAL].delivered.grid_an == pytest.approx(1200.0)
    assert not result.balance_cr[Carrier.GASNATURAL].by_srv.epus
    fft.assert_triple(result.balance.weighted.b, RenNrenCo2(6.0, 828.0, 230.4))

    config = CalculationConfig(use_cogen_export_factor=True)
    result = calculate(components, fft.get_peninsula_factors(), config)
    fft.assert_triple(result.balance.weighted.b, RenNrenCo2(3.0, 714.0, 151.2))


@pytest.mark.base
def test_cogeneration_export_factor_from_district_network():
    """The computed export factor uses the resolved factors of the cogeneration input."""
    components = fft.get_components(
        fft.used(Carrier.ELECTRICIDAD, Service.CAL, 20.0),
        fft.produced(ProdSource.EL_COGEN, 40.0, component_id=2),
        fft.used(Carrier.RED1, Service.COGEN, 100.0, component_id=3),
    )
    config = CalculationConfig(use_cogen_export_factor=True, user_wf=UserWF(red1=RenNrenCo2(0.5, 0.5, 0.1)))

    resolved = resolve_wfactors(components, fft.get_peninsula_factors(), config)
    fft.assert_triple(
        resolved.get(Carrier.ELECTRICIDAD, Source.COGEN, Dest.A_RED, Step.A), RenNrenCo2(1.25, 1.25, 0.25)
    )

    result = calculate(components, fft.get_peninsula_factors(), config)
    fft.assert_triple(result.balance_cr[Carrier.RED1].weighted.delivered_grid, RenNrenCo2(600.0, 600.0, 120.0))
    fft.assert_triple(result.balance.weighted.b, RenNrenCo2(300.0, 300.0, 60.0))


@pytest.mark.base
def test_resolve_wfactors():
    """Resolved factors include user values and only the factors the components need."""
    components = fft.get_components(
        fft.used(Carrier.ELECTRICIDAD, Service.CAL, 20.0),
        fft.used(Carrier.ELECTRICIDAD, Service.NEPB, 2.0, component_id=2),
        fft.produced(ProdSource.EL_COGEN, 40.0, component_id=3),
        fft.used(Carrier.GASNATURAL, Service.COGEN, 100.0, component_id=4),
    )
    config = CalculationConfig(user_wf=UserWF(cogen_to_grid=RenNrenCo2(0.0, 2.0, 0.2)), strip_nepb=True)
    resolved = resolve_wfactors(components, fft.get_peninsula_factors(), config)

    assert resolved.get(Carrier.ELECTRICIDAD, Source.COGEN, Dest.A_RED, Step.A) == RenNrenCo2(0.0, 2.0, 0.2)
    assert not resolved.has(Carrier.ELECTRICIDAD, Source.COGEN, Dest.A_NEPB, Step.A)
    assert not resolved.has(Carrier.BIOMASA, Source.RED, Dest.SUMINISTRO, Step.A)
    assert resolved.get_meta("CTE_COGEN") == "0.000, 2.000, 0.200"


@pytest.mark.base
def test_calculate_normalizes_components():
    """Ambient heat use without declared production is produced on-site."""
    components = fft.get_components(
        fft.used(Carrier.ELECTRICIDAD, Service.CAL, 10.0),
        fft.used(Carrier.EAMBIENTE, Service.CAL, 20.0, component_id=2),
    )
    result = calculate(components, fft.get_peninsula_factors(), CalculationConfig(arearef=10.0))

    ambient = result.balance_cr[Carrier.EAMBIENTE]
    assert ambient.delivered.grid_an == 0.0
    fft.assert_triple(ambient.weighted.b, RenNrenCo2(240.0, 0.0, 0.0))
    assert result.arearef == 10.0
    assert result.rer_onst == pytest.approx(240.0 / (240.0 + 120.0 * 2.368))


@pytest.mark.base
def test_calculate_validates_input():
    """Invalid parameters or components are rejected before the calculation."""
    components = get_electricity_and_gas_components()
    with pytest.raises(WrongInput):
        calculate(components, fft.get_peninsula_factors(), CalculationConfig(k_exp=1.5))

    components.cdata.append(Prod(id=9, source=ProdSource.EL_INSITU, values=[1.0]))
    with pytest.raises(WrongInput):
        calculate(components, fft.get_peninsula_factors())


@pytest.mark.base
def test_energy_performance_to_json():
    """Results are serialized to JSON."""
    result = compute(get_electricity_and_gas_components(), arearef=100.0)
    result.misc = {"fraccion_ren": "0.25", "texto": "abc"}
    data = json.loads(result.to_json())  # type: ignore

    assert data["arearef"] == 100.0
    assert data["balance"]["weighted"]["b"]["nren"] == pytest.approx(637.32)
    assert data["balance"]["used"]["epus_by_srv"]["CAL"] == pytest.approx(360.0)
    assert "ELECTRICIDAD" in data["balance_cr"]
    assert result.get_misc_str_pct1d("fraccion_ren") == "25.0"
    assert result.get_misc_str_1d("texto") == "-"
    assert result.get_misc_str_1d("missing") == "-"
