"""Regulatory weighting factors by location.

Grid supply factors of the RITE recognised document (20/07/2014) for the Spanish
territories. Only the factors that can not be derived are listed; the rest are
added by FactorResolver.normalize.
"""

# clean

import enum
from typing import Dict, Tuple

from epbdcalc.energytypes import Carrier, Dest, Source, Step
from epbdcalc.errors import WrongInput
from epbdcalc.factors import Factor, Factors
from epbdcalc.metadata import Meta


@enum.unique
class Location(str, enum.Enum):

    """Territories with their own electricity grid factors."""

    PENINSULA = "PENINSULA"
    BALEARES = "BALEARES"
    CANARIAS = "CANARIAS"
    CEUTAMELILLA = "CEUTAMELILLA"


# carrier: (ren, nren, co2), same for every location
COMMON_SUPPLY_FACTORS: Tuple[Tuple[Carrier, float, float, float], ...] = (
    (Carrier.BIOCARBURANTE, 1.028, 0.085, 0.018),
    (Carrier.BIOMASA, 1.003, 0.034, 0.018),
    (Carrier.BIOMASADENSIFICADA, 1.028, 0.085, 0.018),
    (Carrier.CARBON, 0.002, 1.082, 0.472),
    (Carrier.GASNATURAL, 0.005, 1.190, 0.252),
    (Carrier.GASOLEO, 0.003, 1.179, 0.311),
    (Carrier.GLP, 0.003, 1.201, 0.254),
)

ELECTRICITY_SUPPLY_FACTORS: Dict[Location, Tuple[float, float, float]] = {
    Location.PENINSULA: (0.414, 1.954, 0.331),
    Location.BALEARES: (0.082, 2.968, 0.932),
    Location.CANARIAS: (0.070, 2.924, 0.776),
    Location.CEUTAMELILLA: (0.072, 2.718, 0.721),
}


def get_regional_factors(location: str) -> Factors:
    """New table with the grid supply factors of a location.

    Raises WrongInput for an unknown location.
    """
    try:
        loc = Location(location)
    except ValueError as exc:
        raise WrongInput(f"Unknown location '{location}' for the weighting factors") from exc

    wdata = [
        Factor(
            carrier, Source.RED, Dest.SUMINISTRO, Step.A, *values,
            "Resources used to supply the carrier from the grid",
        )
        for carrier, *values in COMMON_SUPPLY_FACTORS
    ]
    ren, nren, co2 = ELECTRICITY_SUPPLY_FACTORS[loc]
    wdata.append(
        Factor(
            Carrier.ELECTRICIDAD, Source.RED, Dest.SUMINISTRO, Step.A, ren, nren, co2,
            f"Resources used to supply electricity ({loc.value}) from the grid",
        )
    )
    wmeta = [
        Meta("CTE_FUENTE", "RITE2014"),
        Meta("CTE_LOCALIZACION", loc.value),
    ]
    return Factors(wmeta=wmeta, wdata=wdata)
