"""Weighting factors table.

A weighting factor converts delivered or exported energy of a carrier into renewable
and non renewable primary energy and CO2 emissions. Factors are keyed by
(carrier, source, destination, step).
"""

# clean

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

import pandas as pd
from dataclasses_json import dataclass_json

from epbdcalc.energytypes import Carrier, Dest, Source, Step
from epbdcalc.errors import MissingFactor, ParseError
from epbdcalc.metadata import Meta, MetaVec
from epbdcalc.rennrenco2 import RenNrenCo2


@dataclass_json
@dataclass
class Factor:

    """Weighting factor for a carrier, source, destination and calculation step."""

    carrier: Carrier
    source: Source
    dest: Dest
    step: Step
    ren: float
    nren: float
    co2: float
    comment: str = ""

    def factors(self) -> RenNrenCo2:
        """Weighting factor values as a RenNrenCo2 triple."""
        return RenNrenCo2(self.ren, self.nren, self.co2)

    def set_values(self, values: RenNrenCo2) -> None:
        """Overwrite ren, nren and co2 values."""
        self.ren = values.ren
        self.nren = values.nren
        self.co2 = values.co2

    def key(self):
        """Lookup key of the factor."""
        return (self.carrier, self.source, self.dest, self.step)

    def __str__(self) -> str:
        return (
            f"{self.carrier.value}, {self.source.value}, {self.dest.value}, {self.step.value}, "
            f"{self.ren:.3f}, {self.nren:.3f}, {self.co2:.3f} # {self.comment}"
        )


def describe_key(carrier: Carrier, source: Source, dest: Dest, step: Step) -> str:
    """Readable description of a factor key for error messages."""
    return f"{carrier.value}, {source.value}, {dest.value}, {step.value}"


@dataclass
class Factors(MetaVec):

    """List of weighting factors bundled with its metadata.

    The list is not assumed to be complete: see FactorResolver.normalize.
    """

    wmeta: List[Meta] = field(default_factory=list)
    wdata: List[Factor] = field(default_factory=list)

    def get_metavec(self) -> List[Meta]:
        return self.wmeta

    def find(self, carrier: Carrier, source: Source, dest: Dest, step: Step) -> Optional[Factor]:
        """Return the first factor with the given key or None."""
        for factor in self.wdata:
            if factor.carrier == carrier and factor.source == source and factor.dest == dest and factor.step == step:
                return factor
        return None

    def get(self, carrier: Carrier, source: Source, dest: Dest, step: Step) -> RenNrenCo2:
        """Return the values of a factor. Raises MissingFactor if it is not defined."""
        factor = self.find(carrier, source, dest, step)
        if factor is None:
            raise MissingFactor(describe_key(carrier, source, dest, step))
        return factor.factors()

    def has(self, carrier: Carrier, source: Source, dest: Dest, step: Step) -> bool:
        """Check if a factor is defined."""
        return self.find(carrier, source, dest, step) is not None

    def carriers(self) -> List[Carrier]:
        """Carriers with at least one factor, in order of appearance."""
        carriers: List[Carrier] = []
        for factor in self.wdata:
            if factor.carrier not in carriers:
                carriers.append(factor.carrier)
        return carriers

    def update_wfactor(
        self, carrier: Carrier, source: Source, dest: Dest, step: Step, values: RenNrenCo2, comment: str
    ) -> None:
        """Set the values of a factor, appending it when it does not exist."""
        factor = self.find(carrier, source, dest, step)
        if factor is None:
            self.wdata.append(Factor(carrier, source, dest, step, values.ren, values.nren, values.co2, comment))
        else:
            factor.set_values(values)
            factor.comment = comment

    def ensure_wfactor(
        self, carrier: Carrier, source: Source, dest: Dest, step: Step, values: RenNrenCo2, comment: str
    ) -> None:
        """Append a factor only when it does not exist."""
        if not self.has(carrier, source, dest, step):
            self.wdata.append(Factor(carrier, source, dest, step, values.ren, values.nren, values.co2, comment))

    def strip_nepb(self) -> None:
        """Remove factors for export to non EPB uses."""
        self.wdata = [factor for factor in self.wdata if factor.dest != Dest.A_NEPB]

    def copy(self) -> "Factors":
        """Deep copy of the factors and their metadata."""
        return Factors(
            wmeta=[Meta(meta.key, meta.value) for meta in self.wmeta],
            wdata=[replace(factor) for factor in self.wdata],
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Factors as a table with one row per factor."""
        rows = [
            {
                "carrier": factor.carrier.value,
                "source": factor.source.value,
                "dest": factor.dest.value,
                "step": factor.step.value,
                "ren": factor.ren,
                "nren": factor.nren,
                "co2": factor.co2,
                "comment": factor.comment,
            }
            for factor in self.wdata
        ]
        return pd.DataFrame(rows, columns=["carrier", "source", "dest", "step", "ren", "nren", "co2", "comment"])

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "wmeta": [meta.to_dict() for meta in self.wmeta],  # type: ignore
            "wdata": [factor.to_dict(encode_json=True) for factor in self.wdata],  # type: ignore
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Factors":
        """Build Factors from a dict as written by to_dict."""
        try:
            return cls(
                wmeta=[Meta.from_dict(meta) for meta in data.get("wmeta", [])],  # type: ignore
                wdata=[Factor.from_dict(factor) for factor in data.get("wdata", [])],  # type: ignore
            )
        except (KeyError, ValueError, TypeError) as exc:
            raise ParseError(f"Could not read weighting factors: {exc}") from exc

    def __str__(self) -> str:
        metalines = [f"#META {meta.key}: {meta.value}" for meta in self.wmeta]
        datalines = [str(factor) for factor in self.wdata]
        return "\n".join(metalines + datalines)


@dataclass_json
@dataclass
class UserWF:

    """User defined weighting factors for district networks and exported cogenerated electricity.

    Values that are None are taken from the factor table or from the defaults.
    """

    red1: Optional[RenNrenCo2] = None
    red2: Optional[RenNrenCo2] = None
    cogen_to_grid: Optional[RenNrenCo2] = None
    cogen_to_nepb: Optional[RenNrenCo2] = None

    @classmethod
    def get_default_config(cls) -> "UserWF":
        """Standard values used when neither the user nor the factor table defines them."""
        return UserWF(
            red1=RED_DEFAULTS_RED1,
            red2=RED_DEFAULTS_RED2,
            cogen_to_grid=COGEN_DEFAULTS_TO_GRID,
            cogen_to_nepb=COGEN_DEFAULTS_TO_NEPB,
        )

    def with_defaults(self) -> "UserWF":
        """Copy where undefined values are replaced by the standard defaults."""
        defaults = UserWF.get_default_config()
        return UserWF(
            red1=self.red1 if self.red1 is not None else defaults.red1,
            red2=self.red2 if self.red2 is not None else defaults.red2,
            cogen_to_grid=self.cogen_to_grid if self.cogen_to_grid is not None else defaults.cogen_to_grid,
            cogen_to_nepb=self.cogen_to_nepb if self.cogen_to_nepb is not None else defaults.cogen_to_nepb,
        )


# Default factors for district networks (RED1, RED, SUMINISTRO, A and RED2, RED, SUMINISTRO, A)
RED_DEFAULTS_RED1 = RenNrenCo2(0.0, 1.3, 0.3)
RED_DEFAULTS_RED2 = RenNrenCo2(0.0, 1.3, 0.3)
# Default factors for exported cogenerated electricity (ELECTRICIDAD, COGEN, A_RED | A_NEPB, A)
COGEN_DEFAULTS_TO_GRID = RenNrenCo2(0.0, 2.5, 0.3)
COGEN_DEFAULTS_TO_NEPB = RenNrenCo2(0.0, 2.5, 0.3)
