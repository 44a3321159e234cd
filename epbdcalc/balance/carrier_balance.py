"""Energy balance of a single energy carrier.

Follows the EN ISO 52000-1 procedure to compute the used, produced, exported and
delivered energy of a carrier for each timestep and for the whole period, and the
weighted energy for calculation steps A and B. Formula numbers in the comments
refer to EN ISO 52000-1.
"""

# clean

from dataclasses import dataclass, field
from typing import Callable, Dict, List

import numpy as np
from dataclasses_json import dataclass_json

from epbdcalc import log, vecops
from epbdcalc.balance.service_allocation import ByServiceEnergy, ServiceAllocator
from epbdcalc.components import Energy, Prod
from epbdcalc.energytypes import Carrier, Dest, ProdSource, Service, Source, Step
from epbdcalc.factors import Factors
from epbdcalc.rennrenco2 import RenNrenCo2

# Minimum annual production used to split production between sources
MIN_PRODUCTION = 1e-3


@dataclass_json
@dataclass
class UsedEnergy:

    """Used energy data and results."""

    # Energy used for EPB services at each timestep
    epus_t: List[float] = field(default_factory=list)
    epus_an: float = 0.0
    # Energy used for non EPB services at each timestep
    nepus_t: List[float] = field(default_factory=list)
    nepus_an: float = 0.0
    # Energy used as input of cogeneration systems at each timestep
    cgnus_t: List[float] = field(default_factory=list)
    cgnus_an: float = 0.0


@dataclass_json
@dataclass
class ProducedEnergy:

    """Produced energy data and results."""

    # Produced energy from all sources at each timestep
    t: List[float] = field(default_factory=list)
    an: float = 0.0
    # Produced energy at each timestep, by source
    by_src_t: Dict[ProdSource, List[float]] = field(default_factory=dict)
    by_src_an: Dict[ProdSource, float] = field(default_factory=dict)
    # Produced energy used for EPB services at each timestep
    epus_t: List[float] = field(default_factory=list)
    epus_an: float = 0.0
    # Produced energy used for EPB services, by source
    epus_by_src_t: Dict[ProdSource, List[float]] = field(default_factory=dict)
    epus_by_src_an: Dict[ProdSource, float] = field(default_factory=dict)
    # Produced energy used for each EPB service, by source
    epus_by_srv_by_src_an: Dict[ProdSource, Dict[Service, float]] = field(default_factory=dict)


@dataclass_json
@dataclass
class ExportedEnergy:

    """Exported energy data and results."""

    # Exported energy to the grid and non EPB services at each timestep
    t: List[float] = field(default_factory=list)
    an: float = 0.0
    # Exported energy to the grid
    grid_t: List[float] = field(default_factory=list)
    grid_an: float = 0.0
    # Exported energy to non EPB services
    nepus_t: List[float] = field(default_factory=list)
    nepus_an: float = 0.0
    # Exported energy to the grid and non EPB services, by source
    by_src_t: Dict[ProdSource, List[float]] = field(default_factory=dict)
    by_src_an: Dict[ProdSource, float] = field(default_factory=dict)


@dataclass_json
@dataclass
class DeliveredEnergy:

    """Delivered energy data and results."""

    # Delivered energy by the grid or on-site sources
    an: float = 0.0
    # Delivered energy by the grid
    grid_t: List[float] = field(default_factory=list)
    grid_an: float = 0.0
    # Delivered energy by on-site sources
    onst_t: List[float] = field(default_factory=list)
    onst_an: float = 0.0


@dataclass_json
@dataclass
class WeightedEnergy:

    """Weighted energy results."""

    # Weighted energy for calculation step A
    a: RenNrenCo2 = field(default_factory=RenNrenCo2)
    # Weighted energy for calculation step B
    b: RenNrenCo2 = field(default_factory=RenNrenCo2)
    # Weighted delivered energy by the grid and on-site sources
    delivered: RenNrenCo2 = field(default_factory=RenNrenCo2)
    delivered_grid: RenNrenCo2 = field(default_factory=RenNrenCo2)
    delivered_onst: RenNrenCo2 = field(default_factory=RenNrenCo2)
    # Weighted exported energy for calculation step A
    exported_a: RenNrenCo2 = field(default_factory=RenNrenCo2)
    # Weighted exported energy, effect of step B, to non EPB services, to the grid and total
    exported_nepus_ab: RenNrenCo2 = field(default_factory=RenNrenCo2)
    exported_grid_ab: RenNrenCo2 = field(default_factory=RenNrenCo2)
    exported_ab: RenNrenCo2 = field(default_factory=RenNrenCo2)
    # Weighted exported energy for calculation step B
    exported: RenNrenCo2 = field(default_factory=RenNrenCo2)


@dataclass_json
@dataclass
class BalanceCarrier:

    """Detailed results of the energy balance of a carrier."""

    carrier: Carrier
    # Fraction of the EPB use for each EPB service
    f_us: Dict[Service, float]
    # Load matching factor at each timestep
    f_match: List[float]
    used: UsedEnergy
    produced: ProducedEnergy
    exported: ExportedEnergy
    delivered: DeliveredEnergy
    weighted: WeightedEnergy
    by_srv: ByServiceEnergy


def compute_f_match(epus_t: np.ndarray, pr_t: np.ndarray) -> np.ndarray:
    """Load matching factor for each timestep.

    Uses the simplified value f_match_t = 1.0 (EN ISO 52000-1, 9.6.6.2.2).
    """
    return np.ones_like(epus_t, dtype=float)


class PerCarrierBalanceCalculator:

    """Computes the energy balance of a carrier.

    The load matching factor is computed by f_match_function, which receives the
    EPB use and the total production for each timestep.
    """

    def __init__(
        self, f_match_function: Callable[[np.ndarray, np.ndarray], np.ndarray] = compute_f_match
    ) -> None:
        """Initializes the calculator."""
        self.f_match_function = f_match_function

    def compute(  # pylint: disable=invalid-name,too-many-locals
        self, carrier: Carrier, components: List[Energy], factors: Factors, k_exp: float
    ) -> BalanceCarrier:
        """Compute the balance of a carrier from its components.

        factors must be a normalized table. Raises MissingFactor if a needed factor
        is not defined.
        """
        num_steps = len(components[0].values) if components else 0

        # Used energy (EPB, non EPB and cogeneration input), E_EPus_cr_t, E_nEPus_cr_t, E_cgnus_cr_t
        E_EPus_t = vecops.sum_series([c.values for c in components if c.is_epb_use()], num_steps)
        E_nEPus_t = vecops.sum_series([c.values for c in components if c.is_nepb_use()], num_steps)
        E_cgnus_t = vecops.sum_series([c.values for c in components if c.is_cogen_use()], num_steps)
        E_EPus_an = float(E_EPus_t.sum())

        # Produced energy by source, E_pr_cr_i_t, and from all sources, E_pr_cr_t
        productions = [c for c in components if isinstance(c, Prod)]
        sources = list(dict.fromkeys(c.source for c in productions))
        E_pr_i_t: Dict[ProdSource, np.ndarray] = {
            source: vecops.sum_series([c.values for c in productions if c.source == source], num_steps)
            for source in sources
        }
        E_pr_i_an = {source: float(values.sum()) for source, values in E_pr_i_t.items()}
        E_pr_t = vecops.sum_series(E_pr_i_t.values(), num_steps)
        E_pr_an = float(E_pr_t.sum())

        # Produced energy used for EPB services (formula 30), E_pr_cr_used_EPus_t
        f_match_t = self.f_match_function(E_EPus_t, E_pr_t)
        E_pr_used_EPus_t = f_match_t * np.minimum(E_EPus_t, E_pr_t)
        E_pr_used_EPus_an = float(E_pr_used_EPus_t.sum())

        # Share of each source in the production and produced energy used for EPB services, by source
        f_pr_i = {
            source: (E_pr_i_an[source] / E_pr_an if E_pr_an > MIN_PRODUCTION else 0.0) for source in sources
        }
        E_pr_i_used_EPus_t = {source: E_pr_used_EPus_t * f_pr_i[source] for source in sources}
        E_pr_i_used_EPus_an = {source: float(values.sum()) for source, values in E_pr_i_used_EPus_t.items()}

        # Exported energy by source (formula 31), to the grid and to non EPB services (formulas 32 and 33)
        E_exp_i_t = {source: E_pr_i_t[source] - E_pr_i_used_EPus_t[source] for source in sources}
        E_exp_i_an = {source: float(values.sum()) for source, values in E_exp_i_t.items()}
        E_exp_t = E_pr_t - E_pr_used_EPus_t
        E_exp_an = float(E_exp_t.sum())
        E_exp_nEPus_t = np.minimum(E_exp_t, E_nEPus_t)
        E_exp_nEPus_an = float(E_exp_nEPus_t.sum())
        E_exp_grid_t = E_exp_t - E_exp_nEPus_t
        E_exp_grid_an = float(E_exp_grid_t.sum())

        # Delivered energy by the grid (formula 34) and by on-site sources
        E_del_grid_t = E_EPus_t - E_pr_used_EPus_t + E_cgnus_t
        E_del_grid_an = float(E_del_grid_t.sum())
        E_del_onst_t = E_pr_used_EPus_t
        E_del_onst_an = E_pr_used_EPus_an

        # Weighted delivered energy (formula 19, step A)
        E_we_del_grid_an = E_del_grid_an * factors.get(carrier, Source.RED, Dest.SUMINISTRO, Step.A)
        E_we_del_onst_an = RenNrenCo2.zero()
        if E_pr_an != 0.0:
            for source in sources:
                E_we_del_onst_an = E_we_del_onst_an + E_pr_i_used_EPus_an[source] * factors.get(
                    carrier, source.source(), Dest.SUMINISTRO, Step.A
                )
        E_we_del_an = E_we_del_grid_an + E_we_del_onst_an

        # Weighted exported energy (formulas 20, 22 and 23)
        if E_exp_an == 0.0:
            E_we_exp_A_an = RenNrenCo2.zero()
            E_we_exp_nEPus_AB_an = RenNrenCo2.zero()
            E_we_exp_grid_AB_an = RenNrenCo2.zero()
        else:
            f_exp_i = {source: E_exp_i_an[source] / E_exp_an for source in sources}
            fpA_nEPus = self._mean_export_factor(
                carrier, factors, f_exp_i, Dest.A_NEPB, Step.A, E_exp_nEPus_an
            )
            fpA_grid = self._mean_export_factor(carrier, factors, f_exp_i, Dest.A_RED, Step.A, E_exp_grid_an)
            E_we_exp_A_an = E_exp_nEPus_an * fpA_nEPus + E_exp_grid_an * fpA_grid

            fpB_nEPus = self._mean_export_factor(
                carrier, factors, f_exp_i, Dest.A_NEPB, Step.B, E_exp_nEPus_an
            )
            fpB_grid = self._mean_export_factor(carrier, factors, f_exp_i, Dest.A_RED, Step.B, E_exp_grid_an)
            E_we_exp_nEPus_AB_an = E_exp_nEPus_an * (fpB_nEPus - fpA_nEPus)
            E_we_exp_grid_AB_an = E_exp_grid_an * (fpB_grid - fpA_grid)
        E_we_exp_AB_an = E_we_exp_nEPus_AB_an + E_we_exp_grid_AB_an
        E_we_exp_an = E_we_exp_A_an + k_exp * E_we_exp_AB_an

        # Weighted energy (formula 2)
        E_we_A_an = E_we_del_an - E_we_exp_A_an
        E_we_an = E_we_del_an - E_we_exp_an

        # Allocation to EPB services
        f_us = ServiceAllocator.compute_fractions(components)
        by_srv = ServiceAllocator.allocate(f_us, E_EPus_an, E_we_A_an, E_we_an)

        log.debug(f"Balance for {carrier.value}: step A [{E_we_A_an}], step B [{E_we_an}]")

        return BalanceCarrier(
            carrier=carrier,
            f_us=f_us,
            f_match=vecops.to_list(f_match_t),
            used=UsedEnergy(
                epus_t=vecops.to_list(E_EPus_t),
                epus_an=E_EPus_an,
                nepus_t=vecops.to_list(E_nEPus_t),
                nepus_an=float(E_nEPus_t.sum()),
                cgnus_t=vecops.to_list(E_cgnus_t),
                cgnus_an=float(E_cgnus_t.sum()),
            ),
            produced=ProducedEnergy(
                t=vecops.to_list(E_pr_t),
                an=E_pr_an,
                by_src_t={source: vecops.to_list(values) for source, values in E_pr_i_t.items()},
                by_src_an=E_pr_i_an,
                epus_t=vecops.to_list(E_pr_used_EPus_t),
                epus_an=E_pr_used_EPus_an,
                epus_by_src_t={source: vecops.to_list(values) for source, values in E_pr_i_used_EPus_t.items()},
                epus_by_src_an=E_pr_i_used_EPus_an,
                epus_by_srv_by_src_an=ServiceAllocator.allocate_by_source(f_us, E_pr_i_used_EPus_an),
            ),
            exported=ExportedEnergy(
                t=vecops.to_list(E_exp_t),
                an=E_exp_an,
                grid_t=vecops.to_list(E_exp_grid_t),
                grid_an=E_exp_grid_an,
                nepus_t=vecops.to_list(E_exp_nEPus_t),
                nepus_an=E_exp_nEPus_an,
                by_src_t={source: vecops.to_list(values) for source, values in E_exp_i_t.items()},
                by_src_an=E_exp_i_an,
            ),
            delivered=DeliveredEnergy(
                an=E_del_grid_an + E_del_onst_an,
                grid_t=vecops.to_list(E_del_grid_t),
                grid_an=E_del_grid_an,
                onst_t=vecops.to_list(E_del_onst_t),
                onst_an=E_del_onst_an,
            ),
            weighted=WeightedEnergy(
                a=E_we_A_an,
                b=E_we_an,
                delivered=E_we_del_an,
                delivered_grid=E_we_del_grid_an,
                delivered_onst=E_we_del_onst_an,
                exported_a=E_we_exp_A_an,
                exported_nepus_ab=E_we_exp_nEPus_AB_an,
                exported_grid_ab=E_we_exp_grid_AB_an,
                exported_ab=E_we_exp_AB_an,
                exported=E_we_exp_an,
            ),
            by_srv=by_srv,
        )

    @staticmethod
    def _mean_export_factor(
        carrier: Carrier,
        factors: Factors,
        f_exp_i: Dict[ProdSource, float],
        dest: Dest,
        step: Step,
        exported_to_dest_an: float,
    ) -> RenNrenCo2:
        """Mean export factor to a destination, weighted by the share of each source in the exported energy.

        Returns the zero triple, without looking up any factor, when nothing is exported to dest.
        """
        if exported_to_dest_an == 0.0:
            return RenNrenCo2.zero()
        mean_factor = RenNrenCo2.zero()
        for source, f_exp in f_exp_i.items():
            if f_exp == 0.0:
                continue
            mean_factor = mean_factor + f_exp * factors.get(carrier, source.source(), dest, step)
        return mean_factor
