"""Energy performance of a building according to EN ISO 52000-1.

energy_performance computes the balance of every carrier, aggregates the results
for the whole building, normalizes them by the reference area and derives the
renewable energy ratios. calculate runs the whole chain from raw weighting factors.
"""

# clean

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from dataclasses_json import dataclass_json

from epbdcalc import log
from epbdcalc.balance.building_balance import Balance, BalNeeds
from epbdcalc.balance.carrier_balance import BalanceCarrier, PerCarrierBalanceCalculator
from epbdcalc.calculation_config import AREAREF_MIN, CalculationConfig
from epbdcalc.components import Components
from epbdcalc.energytypes import Carrier, Dest, Service, Source, Step
from epbdcalc.errors import WrongInput
from epbdcalc.factor_resolver import FactorResolver
from epbdcalc.factors import Factors


@dataclass_json
@dataclass
class EnergyPerformance:

    """Data and results of an energy performance calculation."""

    components: Components
    wfactors: Factors
    # Exported energy factor [0, 1]
    k_exp: float
    # Reference area used for energy performance ratios (>1e-3)
    arearef: float
    # Energy balance results by carrier
    balance_cr: Dict[Carrier, BalanceCarrier]
    # Global energy balance results, absolute and by reference area
    balance: Balance
    balance_m2: Balance
    # Renewable energy ratio, distant perimeter: RER = we_ren / we_tot
    rer: float
    # Renewable energy ratio, near-by perimeter: RER_nrb = we_ren_nrb / we_tot
    rer_nrb: float
    # Renewable energy ratio, on-site perimeter: RER_onst = we_ren_onst / we_tot
    rer_onst: float
    # Additional user data
    misc: Optional[Dict[str, str]] = None

    def get_misc_str_1d(self, key: str) -> str:
        """Misc value with one decimal, or a dash if it is missing or not a number."""
        return self._format_misc(key, 1.0)

    def get_misc_str_pct1d(self, key: str) -> str:
        """Misc value as a percentage with one decimal, or a dash if it is missing or not a number."""
        return self._format_misc(key, 100.0)

    def _format_misc(self, key: str, scale: float) -> str:
        if self.misc is None or key not in self.misc:
            return "-"
        try:
            return f"{scale * float(self.misc[key]):.1f}"
        except ValueError:
            return "-"


class GlobalAggregator:

    """Aggregates the carrier balances of a building."""

    def __init__(self, calculator: Optional[PerCarrierBalanceCalculator] = None) -> None:
        """Initializes the aggregator with a carrier balance calculator."""
        if calculator is None:
            calculator = PerCarrierBalanceCalculator()
        self.calculator = calculator

    def compute_carrier_balances(
        self, components: Components, wfactors: Factors, k_exp: float
    ) -> Dict[Carrier, BalanceCarrier]:
        """Balance of every carrier in the components. The first error aborts the calculation."""
        balance_cr: Dict[Carrier, BalanceCarrier] = {}
        for carrier in components.available_carriers():
            balance_cr[carrier] = self.calculator.compute(carrier, components.by_carrier(carrier), wfactors, k_exp)
        return balance_cr

    @staticmethod
    def accumulate(balance_cr: Dict[Carrier, BalanceCarrier], needs: Dict[Service, Optional[float]]) -> Balance:
        """Building balance as the sum of the carrier balances."""
        balance = Balance(
            needs=BalNeeds(ACS=needs.get(Service.ACS), CAL=needs.get(Service.CAL), REF=needs.get(Service.REF))
        )
        for carrier_balance in balance_cr.values():
            balance.add_carrier(carrier_balance)
        return balance

    def aggregate(
        self,
        components: Components,
        wfactors: Factors,
        k_exp: float,
        arearef: float,
        misc: Optional[Dict[str, str]] = None,
    ) -> EnergyPerformance:
        """Energy performance of the building.

        wfactors must be a normalized table. Raises WrongInput for a reference area
        not greater than 1e-3 and MissingFactor when a needed factor is not defined.
        """
        if arearef <= AREAREF_MIN:
            raise WrongInput(f"The reference area can not be zero or almost zero and {arearef} was found")

        balance_cr = self.compute_carrier_balances(components, wfactors, k_exp)
        balance = self.accumulate(balance_cr, components.needs())
        balance_m2 = balance.normalize_by_area(arearef)

        rer, rer_nrb, rer_onst = self.compute_renewable_ratios(components, wfactors, k_exp, balance)
        log.debug(f"Energy performance: step B [{balance.weighted.b}], RER = {rer:.3f}")

        return EnergyPerformance(
            components=components,
            wfactors=wfactors,
            k_exp=k_exp,
            arearef=arearef,
            balance_cr=balance_cr,
            balance=balance,
            balance_m2=balance_m2,
            rer=rer,
            rer_nrb=rer_nrb,
            rer_onst=rer_onst,
            misc=misc,
        )

    def compute_renewable_ratios(
        self, components: Components, wfactors: Factors, k_exp: float, balance: Balance
    ) -> Tuple[float, float, float]:
        """Renewable energy ratios for the distant, near-by and on-site perimeters.

        The near-by ratio repeats the carrier balances with near-by perimeter factors.
        All ratios are 0 when the total weighted energy is 0.
        """
        we_tot = balance.weighted.b.tot()
        if we_tot == 0.0:
            return 0.0, 0.0, 0.0
        rer = balance.weighted.b.ren / we_tot

        nearby_factors = FactorResolver.to_nearby_perimeter(wfactors)
        balance_cr_nrb = self.compute_carrier_balances(components, nearby_factors, k_exp)
        we_ren_nrb = sum(carrier_balance.weighted.b.ren for carrier_balance in balance_cr_nrb.values())
        rer_nrb = we_ren_nrb / we_tot

        rer_onst = balance.weighted.delivered_onst.ren / we_tot
        return rer, rer_nrb, rer_onst


def energy_performance(
    components: Components,
    wfactors: Factors,
    k_exp: float,
    arearef: float,
    misc: Optional[Dict[str, str]] = None,
) -> EnergyPerformance:
    """Compute the energy performance from components and normalized weighting factors."""
    return GlobalAggregator().aggregate(components, wfactors, k_exp, arearef, misc)


def resolve_wfactors(components: Components, wfactors: Factors, config: CalculationConfig) -> Factors:
    """Weighting factors for a calculation: user factors applied, normalized and stripped.

    Cogenerated electricity is exported with the user factor if there is one, or with
    the factor computed from the cogeneration inputs when the config asks for it, or
    with the default value.
    """
    user_wf = FactorResolver.user_values(wfactors, config.user_wf)
    resolved = FactorResolver.set_user_wfactors(wfactors, user_wf)
    resolved = FactorResolver.normalize(resolved, user_wf, components)

    if config.use_cogen_export_factor and user_wf.cogen_to_grid is None:
        cogen_factor = FactorResolver.compute_cogeneration_export_factor(
            components, resolved, nearby_only=config.use_nearby_cogen_factor
        )
        if cogen_factor is not None:
            comment = "Resources used to produce cogenerated electricity, from the cogeneration inputs"
            resolved.update_wfactor(
                Carrier.ELECTRICIDAD, Source.COGEN, Dest.A_RED, Step.A, cogen_factor, comment
            )
            if user_wf.cogen_to_nepb is None:
                resolved.update_wfactor(
                    Carrier.ELECTRICIDAD, Source.COGEN, Dest.A_NEPB, Step.A, cogen_factor, comment
                )
    if config.strip_nepb:
        resolved.strip_nepb()
    return FactorResolver.strip(resolved, components)


def calculate(
    components: Components,
    wfactors: Factors,
    config: Optional[CalculationConfig] = None,
    misc: Optional[Dict[str, str]] = None,
) -> EnergyPerformance:
    """Energy performance from raw components and weighting factors."""
    if config is None:
        config = CalculationConfig.get_default_config()
    config.validate()
    components.check_uniform_length()
    normalized_components = components.normalize()
    resolved = resolve_wfactors(normalized_components, wfactors, config)
    return energy_performance(normalized_components, resolved, config.k_exp, config.arearef, misc)
