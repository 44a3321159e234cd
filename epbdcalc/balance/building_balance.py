"""Building energy balance, aggregating the results of all carriers.

The balance is expressed in absolute values or divided by the reference area.
"""

# clean

from dataclasses import dataclass, field
from typing import Dict, Optional, TypeVar

from dataclasses_json import dataclass_json

from epbdcalc.balance.carrier_balance import BalanceCarrier
from epbdcalc.energytypes import Carrier, ProdSource, Service
from epbdcalc.rennrenco2 import RenNrenCo2

KeyT = TypeVar("KeyT")


def _scale_map(values: Dict[KeyT, float], k_area: float) -> Dict[KeyT, float]:
    return {key: value * k_area for key, value in values.items()}


def _scale_nested_map(values: Dict[KeyT, Dict], k_area: float) -> Dict[KeyT, Dict]:
    return {key: _scale_map(inner, k_area) for key, inner in values.items()}


def _scale_weighted_map(values: Dict[Service, RenNrenCo2], k_area: float) -> Dict[Service, RenNrenCo2]:
    return {key: value * k_area for key, value in values.items()}


@dataclass_json
@dataclass
class BalNeeds:

    """Building energy needs, in kWh, for DHW (ACS), heating (CAL) and cooling (REF)."""

    ACS: Optional[float] = None  # pylint: disable=invalid-name
    CAL: Optional[float] = None  # pylint: disable=invalid-name
    REF: Optional[float] = None  # pylint: disable=invalid-name


@dataclass_json
@dataclass
class BalUsed:

    """Used energy for the building balance."""

    # Energy use for EPB services
    epus: float = 0.0
    # Energy use for non EPB services
    nepus: float = 0.0
    # Energy use for cogeneration
    cgnus: float = 0.0
    epus_by_srv: Dict[Service, float] = field(default_factory=dict)
    epus_by_cr: Dict[Carrier, float] = field(default_factory=dict)
    epus_by_cr_by_srv: Dict[Service, Dict[Carrier, float]] = field(default_factory=dict)


@dataclass_json
@dataclass
class BalProd:

    """Energy produced on-site or by cogeneration for the building balance."""

    # Produced energy from all sources
    an: float = 0.0
    by_cr: Dict[Carrier, float] = field(default_factory=dict)
    by_src: Dict[ProdSource, float] = field(default_factory=dict)
    # Produced energy used for EPB services, by source
    epus_by_src: Dict[ProdSource, float] = field(default_factory=dict)
    # Produced energy used for each EPB service, by source
    epus_by_srv_by_src: Dict[ProdSource, Dict[Service, float]] = field(default_factory=dict)


@dataclass_json
@dataclass
class BalDel:

    """Energy delivered by the grid or by on-site sources for the building balance."""

    an: float = 0.0
    onst: float = 0.0
    grid: float = 0.0
    grid_by_cr: Dict[Carrier, float] = field(default_factory=dict)


@dataclass_json
@dataclass
class BalExp:

    """Energy exported to the grid or to non EPB services for the building balance."""

    an: float = 0.0
    grid: float = 0.0
    nepus: float = 0.0


@dataclass_json
@dataclass
class BalWeighted:

    """Weighted energy, steps A and B, for the building balance."""

    a: RenNrenCo2 = field(default_factory=RenNrenCo2)
    a_by_srv: Dict[Service, RenNrenCo2] = field(default_factory=dict)
    b: RenNrenCo2 = field(default_factory=RenNrenCo2)
    b_by_srv: Dict[Service, RenNrenCo2] = field(default_factory=dict)
    # Weighted delivered energy
    delivered: RenNrenCo2 = field(default_factory=RenNrenCo2)
    # Weighted delivered energy from on-site sources
    delivered_onst: RenNrenCo2 = field(default_factory=RenNrenCo2)
    # Weighted exported energy for steps A and B
    exported_a: RenNrenCo2 = field(default_factory=RenNrenCo2)
    exported: RenNrenCo2 = field(default_factory=RenNrenCo2)


@dataclass_json
@dataclass
class Balance:

    """Building balance results for all carriers, absolute or by reference area."""

    needs: BalNeeds = field(default_factory=BalNeeds)
    used: BalUsed = field(default_factory=BalUsed)
    produced: BalProd = field(default_factory=BalProd)
    delivered: BalDel = field(default_factory=BalDel)
    exported: BalExp = field(default_factory=BalExp)
    weighted: BalWeighted = field(default_factory=BalWeighted)

    def add_carrier(self, rhs: BalanceCarrier) -> None:
        """Accumulate the balance of a carrier."""
        cr = rhs.carrier
        self.used.epus += rhs.used.epus_an
        self.used.nepus += rhs.used.nepus_an
        self.used.cgnus += rhs.used.cgnus_an
        self.produced.an += rhs.produced.an
        self.delivered.an += rhs.delivered.an
        self.delivered.onst += rhs.delivered.onst_an
        self.delivered.grid += rhs.delivered.grid_an
        self.exported.an += rhs.exported.an
        self.exported.nepus += rhs.exported.nepus_an
        self.exported.grid += rhs.exported.grid_an

        # E_we_an = E_we_del_an - E_we_exp_an, steps A and B
        self.weighted.a += rhs.weighted.a
        self.weighted.b += rhs.weighted.b
        self.weighted.delivered += rhs.weighted.delivered
        self.weighted.delivered_onst += rhs.weighted.delivered_onst
        self.weighted.exported_a += rhs.weighted.exported_a
        self.weighted.exported += rhs.weighted.exported

        for service, used_for_service in rhs.by_srv.epus.items():
            self.used.epus_by_srv[service] = self.used.epus_by_srv.get(service, 0.0) + used_for_service
            by_cr = self.used.epus_by_cr_by_srv.setdefault(service, {})
            by_cr[cr] = by_cr.get(cr, 0.0) + used_for_service
            if service in rhs.by_srv.we_a:
                self.weighted.a_by_srv[service] = (
                    self.weighted.a_by_srv.get(service, RenNrenCo2.zero()) + rhs.by_srv.we_a[service]
                )
            if service in rhs.by_srv.we_b:
                self.weighted.b_by_srv[service] = (
                    self.weighted.b_by_srv.get(service, RenNrenCo2.zero()) + rhs.by_srv.we_b[service]
                )

        for source, produced in rhs.produced.by_src_an.items():
            self.produced.by_src[source] = self.produced.by_src.get(source, 0.0) + produced
        for source, produced in rhs.produced.epus_by_src_an.items():
            self.produced.epus_by_src[source] = self.produced.epus_by_src.get(source, 0.0) + produced
        for source, by_srv in rhs.produced.epus_by_srv_by_src_an.items():
            totals = self.produced.epus_by_srv_by_src.setdefault(source, {})
            for service, produced in by_srv.items():
                totals[service] = totals.get(service, 0.0) + produced

        if rhs.produced.an != 0.0:
            self.produced.by_cr[cr] = self.produced.by_cr.get(cr, 0.0) + rhs.produced.an
        if rhs.delivered.grid_an != 0.0:
            self.delivered.grid_by_cr[cr] = self.delivered.grid_by_cr.get(cr, 0.0) + rhs.delivered.grid_an
        if rhs.used.epus_an != 0.0:
            self.used.epus_by_cr[cr] = self.used.epus_by_cr.get(cr, 0.0) + rhs.used.epus_an

    def normalize_by_area(self, area: float) -> "Balance":
        """Balance with every value divided by the area. A zero area gives a zero balance."""
        k_area = 0.0 if area == 0.0 else 1.0 / area

        def scale(value: Optional[float]) -> Optional[float]:
            return None if value is None else value * k_area

        return Balance(
            needs=BalNeeds(ACS=scale(self.needs.ACS), CAL=scale(self.needs.CAL), REF=scale(self.needs.REF)),
            used=BalUsed(
                epus=self.used.epus * k_area,
                nepus=self.used.nepus * k_area,
                cgnus=self.used.cgnus * k_area,
                epus_by_srv=_scale_map(self.used.epus_by_srv, k_area),
                epus_by_cr=_scale_map(self.used.epus_by_cr, k_area),
                epus_by_cr_by_srv=_scale_nested_map(self.used.epus_by_cr_by_srv, k_area),
            ),
            produced=BalProd(
                an=self.produced.an * k_area,
                by_cr=_scale_map(self.produced.by_cr, k_area),
                by_src=_scale_map(self.produced.by_src, k_area),
                epus_by_src=_scale_map(self.produced.epus_by_src, k_area),
                epus_by_srv_by_src=_scale_nested_map(self.produced.epus_by_srv_by_src, k_area),
            ),
            delivered=BalDel(
                an=self.delivered.an * k_area,
                onst=self.delivered.onst * k_area,
                grid=self.delivered.grid * k_area,
                grid_by_cr=_scale_map(self.delivered.grid_by_cr, k_area),
            ),
            exported=BalExp(
                an=self.exported.an * k_area,
                grid=self.exported.grid * k_area,
                nepus=self.exported.nepus * k_area,
            ),
            weighted=BalWeighted(
                a=self.weighted.a * k_area,
                a_by_srv=_scale_weighted_map(self.weighted.a_by_srv, k_area),
                b=self.weighted.b * k_area,
                b_by_srv=_scale_weighted_map(self.weighted.b_by_srv, k_area),
                delivered=self.weighted.delivered * k_area,
                delivered_onst=self.weighted.delivered_onst * k_area,
                exported_a=self.weighted.exported_a * k_area,
                exported=self.weighted.exported * k_area,
            ),
        )
