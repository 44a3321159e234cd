"""Completion and transformation of weighting factor tables.

The balance calculation queries factors that are rarely written down explicitly
(on-site production, export of produced energy, district networks). The
FactorResolver derives them from the supply factors so that every lookup made by
the balance calculation can be answered, and fails when a grid supply factor is
missing, since that one can not be derived.
"""

# clean

from typing import List, Optional, Tuple

from epbdcalc import log
from epbdcalc.components import Components, Prod, Used
from epbdcalc.energytypes import Carrier, Dest, Source, Step, NRBY, ONST
from epbdcalc.errors import MissingFactor, WrongInput
from epbdcalc.factors import Factors, UserWF, describe_key
from epbdcalc.rennrenco2 import RenNrenCo2

ONSITE_FACTORS = RenNrenCo2(1.0, 0.0, 0.0)

# Carriers and sources that can be exported to the grid or to non EPB uses
EXPORTABLE_CARRIERS: List[Tuple[Carrier, Source]] = [
    (Carrier.ELECTRICIDAD, Source.INSITU),
    (Carrier.ELECTRICIDAD, Source.COGEN),
    (Carrier.EAMBIENTE, Source.INSITU),
    (Carrier.TERMOSOLAR, Source.INSITU),
]


class FactorResolver:

    """Static helpers to complete and transform weighting factor tables.

    No method modifies its input: every method returns a new Factors instance.
    """

    @staticmethod
    def user_values(factors: Factors, user: Optional[UserWF] = None) -> UserWF:
        """User factors completed with the ones stored in the factors metadata.

        Values given in user win over the CTE_COGEN, CTE_COGENNEPB, CTE_RED1 and CTE_RED2
        metadata. Values missing in both stay None.
        """
        if user is None:
            user = UserWF()
        return UserWF(
            red1=user.red1 if user.red1 is not None else factors.get_meta_rennrenco2("CTE_RED1"),
            red2=user.red2 if user.red2 is not None else factors.get_meta_rennrenco2("CTE_RED2"),
            cogen_to_grid=(
                user.cogen_to_grid if user.cogen_to_grid is not None else factors.get_meta_rennrenco2("CTE_COGEN")
            ),
            cogen_to_nepb=(
                user.cogen_to_nepb
                if user.cogen_to_nepb is not None
                else factors.get_meta_rennrenco2("CTE_COGENNEPB")
            ),
        )

    @staticmethod
    def set_user_wfactors(factors: Factors, user: UserWF) -> Factors:
        """Overwrite or add the user defined district network and cogeneration factors.

        User values come from user or, when missing there, from the factors metadata.
        """
        wfactors = factors.copy()
        user = FactorResolver.user_values(factors, user)
        user_factors = [
            (user.cogen_to_grid, Carrier.ELECTRICIDAD, Source.COGEN, Dest.A_RED, "CTE_COGEN"),
            (user.cogen_to_nepb, Carrier.ELECTRICIDAD, Source.COGEN, Dest.A_NEPB, "CTE_COGENNEPB"),
            (user.red1, Carrier.RED1, Source.RED, Dest.SUMINISTRO, "CTE_RED1"),
            (user.red2, Carrier.RED2, Source.RED, Dest.SUMINISTRO, "CTE_RED2"),
        ]
        for values, carrier, source, dest, metakey in user_factors:
            if values is None:
                continue
            log.debug(f"User defined factor {describe_key(carrier, source, dest, Step.A)}: {values}")
            wfactors.update_wfactor(carrier, source, dest, Step.A, values, "User defined factor")
            wfactors.set_meta(metakey, f"{values.ren:.3f}, {values.nren:.3f}, {values.co2:.3f}")
        return wfactors

    @staticmethod
    def normalize(
        factors: Factors, defaults: Optional[UserWF] = None, components: Optional[Components] = None
    ) -> Factors:
        """Complete a weighting factor table so that the balance calculation can use it.

        Steps:
        - ensure supply factors for on-site carriers (ambient heat and solar thermal)
          from the grid and on-site sources
        - ensure supply factors for the district networks RED1 and RED2
        - ensure the on-site electricity supply factor when electricity is used
        - check that every carrier in the factors and the components has a grid supply factor
        - ensure the cogeneration supply factor (its impact is in the input carrier)
        - ensure step A and step B export factors for exportable carriers

        Raises MissingFactor if some grid supply factor is not defined.
        """
        defaults = FactorResolver.user_values(factors, defaults).with_defaults()
        wfactors = factors.copy()

        carriers = wfactors.carriers()
        if components is not None:
            carriers += [c for c in components.available_carriers() if c not in carriers]

        for carrier in ONST:
            wfactors.ensure_wfactor(
                carrier, Source.INSITU, Dest.SUMINISTRO, Step.A, ONSITE_FACTORS,
                f"Resources used to obtain {carrier.value} on-site",
            )
            wfactors.ensure_wfactor(
                carrier, Source.RED, Dest.SUMINISTRO, Step.A, ONSITE_FACTORS,
                f"Resources used to obtain {carrier.value} on-site (fictitious grid)",
            )

        wfactors.ensure_wfactor(
            Carrier.RED1, Source.RED, Dest.SUMINISTRO, Step.A, defaults.red1,  # type: ignore
            "Resources used to supply energy from district network 1 (user defined)",
        )
        wfactors.ensure_wfactor(
            Carrier.RED2, Source.RED, Dest.SUMINISTRO, Step.A, defaults.red2,  # type: ignore
            "Resources used to supply energy from district network 2 (user defined)",
        )

        has_electricity = Carrier.ELECTRICIDAD in carriers
        if has_electricity:
            wfactors.ensure_wfactor(
                Carrier.ELECTRICIDAD, Source.INSITU, Dest.SUMINISTRO, Step.A, ONSITE_FACTORS,
                "Resources used to produce electricity on-site",
            )

        missing = [
            describe_key(carrier, Source.RED, Dest.SUMINISTRO, Step.A)
            for carrier in carriers
            if not wfactors.has(carrier, Source.RED, Dest.SUMINISTRO, Step.A)
        ]
        if missing:
            raise MissingFactor("; ".join(missing))

        if has_electricity:
            wfactors.ensure_wfactor(
                Carrier.ELECTRICIDAD, Source.COGEN, Dest.SUMINISTRO, Step.A, RenNrenCo2.zero(),
                "Cogeneration supply is accounted for in the input carrier",
            )

        for carrier, source in EXPORTABLE_CARRIERS:
            if carrier == Carrier.ELECTRICIDAD and not has_electricity:
                continue
            FactorResolver._ensure_export_factors(wfactors, carrier, source, defaults)

        log.trace(f"Normalized weighting factors: {len(wfactors.wdata)} entries")
        return wfactors

    @staticmethod
    def _ensure_export_factors(wfactors: Factors, carrier: Carrier, source: Source, defaults: UserWF) -> None:
        """Add the missing step A and step B export factors of an exportable carrier and source."""
        if source == Source.COGEN:
            wfactors.ensure_wfactor(
                carrier, source, Dest.A_RED, Step.A, defaults.cogen_to_grid,  # type: ignore
                "Resources used to produce cogenerated electricity exported to the grid (default value)",
            )
            wfactors.ensure_wfactor(
                carrier, source, Dest.A_NEPB, Step.A, defaults.cogen_to_nepb,  # type: ignore
                "Resources used to produce cogenerated electricity exported to non EPB uses (default value)",
            )
        else:
            supply = wfactors.find(carrier, source, Dest.SUMINISTRO, Step.A)
            if supply is None:
                raise MissingFactor(describe_key(carrier, source, Dest.SUMINISTRO, Step.A))
            wfactors.ensure_wfactor(
                carrier, source, Dest.A_RED, Step.A, supply.factors(),
                "Resources used to produce the energy exported to the grid",
            )
            wfactors.ensure_wfactor(
                carrier, source, Dest.A_NEPB, Step.A, supply.factors(),
                "Resources used to produce the energy exported to non EPB uses",
            )

        grid_supply = wfactors.find(carrier, Source.RED, Dest.SUMINISTRO, Step.A)
        if grid_supply is None:
            raise MissingFactor(describe_key(carrier, Source.RED, Dest.SUMINISTRO, Step.A))
        wfactors.ensure_wfactor(
            carrier, source, Dest.A_RED, Step.B, grid_supply.factors(),
            "Resources saved to the grid by the energy produced and exported to the grid",
        )
        wfactors.ensure_wfactor(
            carrier, source, Dest.A_NEPB, Step.B, grid_supply.factors(),
            "Resources saved to the grid by the energy produced and exported to non EPB uses",
        )

    @staticmethod
    def strip(factors: Factors, components: Components) -> Factors:
        """Remove factors that the components do not need.

        Removes the factors of carriers not present in the components, cogeneration factors
        without cogeneration, non EPB export factors without non EPB use and on-site electricity
        factors without on-site electricity production.
        """
        carriers = components.available_carriers()
        has_cogen = components.has_cogen_production()
        has_nepb = components.has_nepb_use()
        has_elec_onsite = components.has_onsite_electricity_production()

        wfactors = factors.copy()
        wfactors.wdata = [
            f
            for f in wfactors.wdata
            if f.carrier in carriers
            and (f.source != Source.COGEN or has_cogen)
            and (f.dest != Dest.A_NEPB or has_nepb)
            and (f.carrier != Carrier.ELECTRICIDAD or f.source != Source.INSITU or has_elec_onsite)
        ]
        return wfactors

    @staticmethod
    def to_nearby_perimeter(factors: Factors) -> Factors:
        """Convert distant perimeter factors to near-by perimeter factors.

        Grid sourced factors of carriers that are not in the near-by list get ren' = 0 and
        nren' = ren + nren. On-site and cogeneration factors and factors of near-by carriers
        are kept. Cogenerated electricity enters with its own factors.
        """
        wfactors = factors.copy()
        for factor in wfactors.wdata:
            if factor.source in (Source.INSITU, Source.COGEN) or factor.carrier in NRBY:
                continue
            factor.nren = factor.ren + factor.nren
            factor.ren = 0.0
            factor.comment = f"Nearby perimeter: {factor.comment}"
        wfactors.set_meta("CTE_PERIMETRO", "NEARBY")
        return wfactors

    @staticmethod
    def compute_cogeneration_export_factor(
        components: Components, factors: Factors, nearby_only: bool = False
    ) -> Optional[RenNrenCo2]:
        """Weighting factor of the cogenerated electricity from the carriers used to produce it.

        The factor is the sum of the grid supply factors of the carriers used by the
        cogeneration systems, each weighted by the ratio between the energy used of that
        carrier and the electricity produced, over the whole calculation period.
        With nearby_only, only near-by carriers are considered.

        Returns None when there is no cogenerated electricity.
        Raises WrongInput when there is cogenerated electricity without cogeneration input.
        """
        cogen_production = [c for c in components.cdata if isinstance(c, Prod) and c.is_cogen_pr()]
        produced_an = sum(c.values_sum() for c in cogen_production)
        if not cogen_production or produced_an == 0.0:
            return None

        cogen_inputs = [c for c in components.cdata if isinstance(c, Used) and c.is_cogen_use()]
        if not cogen_inputs:
            raise WrongInput("Cogenerated electricity found without energy used as cogeneration input")

        factor = RenNrenCo2.zero()
        for carrier in components.available_carriers():
            used_an = sum(c.values_sum() for c in cogen_inputs if c.carrier == carrier)
            if used_an == 0.0:
                continue
            if nearby_only and not carrier.is_nearby():
                continue
            supply = factors.get(carrier, Source.RED, Dest.SUMINISTRO, Step.A)
            factor = factor + supply * (used_an / produced_an)
        log.debug(f"Cogeneration export factor: {factor}")
        return factor
