"""Energy components: produced, used, auxiliary and output energy time series.

Every component holds one value per calculation timestep. A list of components
together with its metadata forms the Components of a calculation.
"""

# clean

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from dataclasses_json import dataclass_json

from epbdcalc import log
from epbdcalc.energytypes import Carrier, ProdSource, Service, ONST
from epbdcalc.errors import ParseError, WrongInput
from epbdcalc.metadata import Meta, MetaVec
from epbdcalc import vecops


class EnergyComponentBase:

    """Predicates shared by all energy component variants."""

    values: List[float]

    def values_sum(self) -> float:
        """Sum of the timestep values."""
        return float(sum(self.values))

    def is_epb_use(self) -> bool:
        """Used or auxiliary energy for an EPB service."""
        return False

    def is_nepb_use(self) -> bool:
        """Used or auxiliary energy for non EPB services."""
        return False

    def is_cogen_use(self) -> bool:
        """Used energy as input of a cogeneration system."""
        return False

    def is_onsite_pr(self) -> bool:
        """Energy produced on-site."""
        return False

    def is_cogen_pr(self) -> bool:
        """Electricity produced by cogeneration."""
        return False


@dataclass_json
@dataclass
class Prod(EnergyComponentBase):

    """Produced energy, E_pr;cr,i;t, of a production source."""

    id: int
    source: ProdSource
    values: List[float]
    comment: str = ""

    @property
    def carrier(self) -> Carrier:
        return self.source.carrier()

    def is_onsite_pr(self) -> bool:
        return self.source != ProdSource.EL_COGEN

    def is_cogen_pr(self) -> bool:
        return self.source == ProdSource.EL_COGEN


@dataclass_json
@dataclass
class Used(EnergyComponentBase):

    """Used energy, E_X;Y;in;cr,j;t, of a carrier for a service."""

    id: int
    carrier: Carrier
    service: Service
    values: List[float]
    comment: str = ""

    def is_epb_use(self) -> bool:
        return self.service.is_epb()

    def is_nepb_use(self) -> bool:
        return self.service.is_nepb()

    def is_cogen_use(self) -> bool:
        return self.service.is_cogen()


@dataclass_json
@dataclass
class Aux(EnergyComponentBase):

    """Auxiliary electricity, W_X;Y;aux;t, used by the systems of a service."""

    id: int
    service: Service
    values: List[float]
    comment: str = ""

    def __post_init__(self) -> None:
        if self.service.is_cogen():
            raise WrongInput(f"Auxiliary energy of system {self.id} can not be assigned to the cogeneration input")

    @property
    def carrier(self) -> Carrier:
        return Carrier.ELECTRICIDAD

    def is_epb_use(self) -> bool:
        return self.service.is_epb()

    def is_nepb_use(self) -> bool:
        return self.service.is_nepb()


@dataclass_json
@dataclass
class Out(EnergyComponentBase):

    """Output energy, Q_X;Y;out, delivered or absorbed by the systems of a service."""

    id: int
    service: Service
    values: List[float]
    comment: str = ""

    @property
    def carrier(self) -> Optional[Carrier]:
        """Output energy is not tied to a carrier."""
        return None


Energy = Union[Prod, Used, Aux, Out]

ENERGY_KINDS = {"PRODUCCION": Prod, "CONSUMO": Used, "AUX": Aux, "SALIDA": Out}


def energy_kind(component: Energy) -> str:
    """Return the serialization tag of a component."""
    for kind, variant in ENERGY_KINDS.items():
        if isinstance(component, variant):
            return kind
    raise ParseError(f"Unknown energy component {component!r}")


def energy_from_dict(data: Dict[str, Any]) -> Energy:
    """Build a component from a dict with a 'kind' tag."""
    data = dict(data)
    kind = data.pop("kind", None)
    if kind not in ENERGY_KINDS:
        raise ParseError(f"Unknown energy component kind '{kind}'")
    try:
        return ENERGY_KINDS[kind].from_dict(data)  # type: ignore
    except WrongInput:
        raise
    except (KeyError, ValueError, TypeError) as exc:
        raise ParseError(f"Could not read energy component {data}: {exc}") from exc


@dataclass
class Components(MetaVec):

    """List of energy components bundled with its metadata."""

    cmeta: List[Meta] = field(default_factory=list)
    cdata: List[Energy] = field(default_factory=list)

    def get_metavec(self) -> List[Meta]:
        return self.cmeta

    def num_steps(self) -> int:
        """Number of timesteps of the components, 0 if there are no components."""
        if not self.cdata:
            return 0
        return len(self.cdata[0].values)

    def check_uniform_length(self) -> None:
        """Raise WrongInput if the components have different number of timesteps."""
        lengths = {len(component.values) for component in self.cdata}
        if len(lengths) > 1:
            raise WrongInput(f"Components with different number of timesteps found: {sorted(lengths)}")

    def available_carriers(self) -> List[Carrier]:
        """Carriers of the used and produced energy components, in order of appearance."""
        carriers: List[Carrier] = []
        for component in self.cdata:
            carrier = component.carrier
            if carrier is not None and carrier not in carriers:
                carriers.append(carrier)
        return carriers

    def by_carrier(self, carrier: Carrier) -> List[Energy]:
        """Components with the given carrier."""
        return [component for component in self.cdata if component.carrier == carrier]

    def has_cogen_production(self) -> bool:
        """Check if there is cogenerated electricity."""
        return any(component.is_cogen_pr() for component in self.cdata)

    def has_nepb_use(self) -> bool:
        """Check if there is energy use for non EPB services."""
        return any(component.is_nepb_use() for component in self.cdata)

    def has_onsite_electricity_production(self) -> bool:
        """Check if there is on-site electricity production."""
        return any(
            isinstance(component, Prod) and component.source == ProdSource.EL_INSITU for component in self.cdata
        )

    def needs(self) -> Dict[Service, Optional[float]]:
        """Building energy needs for DHW, heating and cooling, from the metadata."""
        return {
            service: self.get_meta_float(f"CTE_NEEDS_{service.value}")
            for service in (Service.ACS, Service.CAL, Service.REF)
        }

    def normalize(self) -> "Components":
        """Return a copy where on-site carrier use is balanced by on-site production.

        Ambient heat and solar thermal energy only need to be declared as used energy:
        the use that is not covered by declared production gets an on-site production
        component for each timestep.
        """
        num_steps = self.num_steps()
        cdata: List[Energy] = list(self.cdata)
        for carrier in ONST:
            used = [c.values for c in self.cdata if isinstance(c, Used) and c.carrier == carrier]
            if not used:
                continue
            produced = [c.values for c in self.cdata if isinstance(c, Prod) and c.carrier == carrier]
            unbalanced = vecops.positive_part(
                vecops.sum_series(used, num_steps) - vecops.sum_series(produced, num_steps)
            )
            if unbalanced.sum() == 0.0:
                continue
            log.debug(f"Adding on-site production of {carrier.value} to balance its use: {unbalanced.sum():.2f}")
            cdata.append(
                Prod(
                    id=0,
                    source=ProdSource(carrier.value),
                    values=vecops.to_list(unbalanced),
                    comment="Balance of used energy without declared production",
                )
            )
        return Components(cmeta=[Meta(m.key, m.value) for m in self.cmeta], cdata=cdata)

    def filter_by_epb_service(self, service: Service) -> "Components":
        """Components of an EPB service.

        Used, auxiliary and output energy of the service are kept. Produced energy is
        assigned to the service in proportion to the service share of the EPB use of
        the produced carrier. Components should be normalized before filtering.
        """
        cdata: List[Energy] = [
            c for c in self.cdata if not isinstance(c, Prod) and getattr(c, "service", None) == service
        ]
        for carrier in self.available_carriers():
            productions = [c for c in self.cdata if isinstance(c, Prod) and c.carrier == carrier]
            if not productions:
                continue
            epus = [c for c in self.by_carrier(carrier) if c.is_epb_use()]
            epus_an = sum(c.values_sum() for c in epus)
            srv_an = sum(c.values_sum() for c in epus if getattr(c, "service", None) == service)
            if epus_an == 0.0 or srv_an == 0.0:
                continue
            f_srv = srv_an / epus_an
            for production in productions:
                cdata.append(
                    Prod(
                        id=production.id,
                        source=production.source,
                        values=[value * f_srv for value in production.values],
                        comment=f"{production.comment} Production assigned to service {service.value}".strip(),
                    )
                )
        filtered = Components(cmeta=[Meta(m.key, m.value) for m in self.cmeta], cdata=cdata)
        filtered.set_meta("CTE_SERVICIO", service.value)
        return filtered

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a dict with a 'kind' tag for every component."""
        return {
            "cmeta": [meta.to_dict() for meta in self.cmeta],  # type: ignore
            "cdata": [
                dict(kind=energy_kind(component), **component.to_dict(encode_json=True))  # type: ignore
                for component in self.cdata
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Components":
        """Build Components from a dict as written by to_dict."""
        components = cls(
            cmeta=[Meta.from_dict(meta) for meta in data.get("cmeta", [])],  # type: ignore
            cdata=[energy_from_dict(component) for component in data.get("cdata", [])],
        )
        components.check_uniform_length()
        return components
