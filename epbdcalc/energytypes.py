""" Enum classes for carriers, sources, destinations, steps and services.

Guidelines for enum classes:
    1. Member names are the codes used in the weighting factor and component data files,
    i.e., 'ELECTRICIDAD' instead of 'Electricity', so that they can be parsed directly.
    2. The value of every member is its own name.
    3. Groups of members that are used together (near-by carriers, EPB services) are
    defined as module level tuples below the enum they belong to.

"""
# clean
import enum
from typing import Tuple


@enum.unique
class Carrier(str, enum.Enum):

    """Energy carriers tracked independently through the balance."""

    # Environment thermal energy (ambient heat of heat pumps, etc.)
    EAMBIENTE = "EAMBIENTE"
    BIOCARBURANTE = "BIOCARBURANTE"
    BIOMASA = "BIOMASA"
    BIOMASADENSIFICADA = "BIOMASADENSIFICADA"
    CARBON = "CARBON"
    ELECTRICIDAD = "ELECTRICIDAD"
    GASNATURAL = "GASNATURAL"
    GASOLEO = "GASOLEO"
    GLP = "GLP"
    # Generic district networks, user defined factors
    RED1 = "RED1"
    RED2 = "RED2"
    # Solar thermal energy
    TERMOSOLAR = "TERMOSOLAR"

    def is_nearby(self) -> bool:
        """Return True for carriers produced in the near-by perimeter."""
        return self in NRBY

    def is_onsite(self) -> bool:
        """Return True for carriers produced on-site."""
        return self in ONST


NRBY: Tuple[Carrier, ...] = (
    Carrier.BIOMASA,
    Carrier.BIOMASADENSIFICADA,
    Carrier.RED1,
    Carrier.RED2,
    Carrier.EAMBIENTE,
    Carrier.TERMOSOLAR,
)

ONST: Tuple[Carrier, ...] = (Carrier.EAMBIENTE, Carrier.TERMOSOLAR)


@enum.unique
class Source(str, enum.Enum):

    """Origin of energy for weighting purposes."""

    RED = "RED"
    INSITU = "INSITU"
    COGEN = "COGEN"


@enum.unique
class ProdSource(str, enum.Enum):

    """Production sources of on-site or cogenerated energy."""

    EL_INSITU = "EL_INSITU"
    EL_COGEN = "EL_COGEN"
    TERMOSOLAR = "TERMOSOLAR"
    EAMBIENTE = "EAMBIENTE"

    def carrier(self) -> Carrier:
        """Carrier of the energy produced by this source."""
        if self in (ProdSource.EL_INSITU, ProdSource.EL_COGEN):
            return Carrier.ELECTRICIDAD
        return Carrier(self.value)

    def source(self) -> Source:
        """Weighting factor source matching this production source."""
        if self == ProdSource.EL_COGEN:
            return Source.COGEN
        return Source.INSITU


@enum.unique
class Dest(str, enum.Enum):

    """Use of energy for weighting purposes."""

    SUMINISTRO = "SUMINISTRO"
    A_RED = "A_RED"
    A_NEPB = "A_NEPB"


@enum.unique
class Step(str, enum.Enum):

    """Calculation step: A (resources used) or B (resources avoided by exporting)."""

    A = "A"
    B = "B"


@enum.unique
class Service(str, enum.Enum):

    """Building services and the pseudo services for non EPB uses and cogeneration input."""

    ACS = "ACS"
    CAL = "CAL"
    REF = "REF"
    VEN = "VEN"
    ILU = "ILU"
    NEPB = "NEPB"
    COGEN = "COGEN"

    def is_epb(self) -> bool:
        """Return True for services included in the energy performance assessment."""
        return self not in (Service.NEPB, Service.COGEN)

    def is_nepb(self) -> bool:
        """Return True for the non EPB pseudo service."""
        return self == Service.NEPB

    def is_cogen(self) -> bool:
        """Return True for the cogeneration input pseudo service."""
        return self == Service.COGEN


SERVICES_EPB: Tuple[Service, ...] = (
    Service.ACS,
    Service.CAL,
    Service.REF,
    Service.VEN,
    Service.ILU,
)
