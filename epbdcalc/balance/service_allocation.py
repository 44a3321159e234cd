"""Allocation of used and weighted energy of a carrier to the EPB services."""

# clean

from dataclasses import dataclass, field
from typing import Dict, List

from dataclasses_json import dataclass_json

from epbdcalc.components import Energy
from epbdcalc.energytypes import ProdSource, Service, SERVICES_EPB
from epbdcalc.rennrenco2 import RenNrenCo2


@dataclass_json
@dataclass
class ByServiceEnergy:

    """Used and weighted energy results by EPB service."""

    # Energy used for EPB services, by service
    epus: Dict[Service, float] = field(default_factory=dict)
    # Weighted energy for calculation step A, by service
    we_a: Dict[Service, RenNrenCo2] = field(default_factory=dict)
    # Weighted energy for calculation step B, by service
    we_b: Dict[Service, RenNrenCo2] = field(default_factory=dict)


class ServiceAllocator:

    """Distributes carrier results to services in proportion to their share of the EPB use."""

    @staticmethod
    def compute_fractions(components: List[Energy]) -> Dict[Service, float]:
        """Fraction of the EPB use of a carrier for each EPB service.

        f_us_cr = (used energy for EPB service_i) / (used energy for all EPB services).
        The map is empty when there is no EPB use and services without use are left out.
        """
        epus = [component for component in components if component.is_epb_use()]
        epus_an = sum(component.values_sum() for component in epus)
        if epus_an == 0.0:
            return {}
        fractions: Dict[Service, float] = {}
        for service in SERVICES_EPB:
            service_an = sum(component.values_sum() for component in epus if component.service == service)  # type: ignore
            if service_an != 0.0:
                fractions[service] = service_an / epus_an
        return fractions

    @staticmethod
    def allocate_energy(fractions: Dict[Service, float], value: float) -> Dict[Service, float]:
        """Split an energy value between services."""
        return {service: value * fraction for service, fraction in fractions.items() if fraction != 0.0}

    @staticmethod
    def allocate_weighted(fractions: Dict[Service, float], value: RenNrenCo2) -> Dict[Service, RenNrenCo2]:
        """Split a weighted energy value between services."""
        return {service: value * fraction for service, fraction in fractions.items() if fraction != 0.0}

    @staticmethod
    def allocate_by_source(
        fractions: Dict[Service, float], values_by_src: Dict[ProdSource, float]
    ) -> Dict[ProdSource, Dict[Service, float]]:
        """Split energy values of each production source between services."""
        return {
            source: ServiceAllocator.allocate_energy(fractions, value) for source, value in values_by_src.items()
        }

    @staticmethod
    def allocate(
        fractions: Dict[Service, float], used_epus_an: float, we_a: RenNrenCo2, we_b: RenNrenCo2
    ) -> ByServiceEnergy:
        """Used energy and step A and B weighted energy by service."""
        return ByServiceEnergy(
            epus=ServiceAllocator.allocate_energy(fractions, used_epus_an),
            we_a=ServiceAllocator.allocate_weighted(fractions, we_a),
            we_b=ServiceAllocator.allocate_weighted(fractions, we_b),
        )
