"""Test for the carrier, source and service enums."""

# clean

import pytest

from epbdcalc.energytypes import Carrier, ProdSource, Service, Source, SERVICES_EPB


@pytest.mark.base
def test_production_sources():
    """Every production source produces a single carrier and has a weighting source."""
    assert ProdSource.EL_INSITU.carrier() == Carrier.ELECTRICIDAD
    assert ProdSource.EL_COGEN.carrier() == Carrier.ELECTRICIDAD
    assert ProdSource.TERMOSOLAR.carrier() == Carrier.TERMOSOLAR
    assert ProdSource.EAMBIENTE.carrier() == Carrier.EAMBIENTE

    assert ProdSource.EL_INSITU.source() == Source.INSITU
    assert ProdSource.EL_COGEN.source() == Source.COGEN
    assert ProdSource.EAMBIENTE.source() == Source.INSITU


@pytest.mark.base
def test_carrier_perimeters():
    """Near-by and on-site carriers."""
    assert Carrier.BIOMASA.is_nearby()
    assert Carrier.RED1.is_nearby()
    assert not Carrier.ELECTRICIDAD.is_nearby()
    assert not Carrier.GASNATURAL.is_nearby()
    assert Carrier.EAMBIENTE.is_onsite()
    assert not Carrier.BIOMASA.is_onsite()


@pytest.mark.base
def test_services():
    """EPB services exclude the non EPB and cogeneration pseudo services."""
    assert Service.CAL.is_epb()
    assert not Service.NEPB.is_epb()
    assert not Service.COGEN.is_epb()
    assert Service.NEPB.is_nepb()
    assert Service.COGEN.is_cogen()
    assert Service.NEPB not in SERVICES_EPB
    assert Service("ACS") == Service.ACS
    assert len(SERVICES_EPB) == 5
