"""Renewable, non renewable primary energy and CO2 emissions triple."""

# clean

from dataclasses import dataclass
from typing import Union

from dataclasses_json import dataclass_json


@dataclass_json
@dataclass(frozen=True)
class RenNrenCo2:

    """Weighted energy or weighting factor values.

    ren and nren are primary energy (renewable and non renewable), co2 are emissions.
    Supports elementwise addition and subtraction and multiplication by a scalar.
    """

    ren: float = 0.0
    nren: float = 0.0
    co2: float = 0.0

    def tot(self) -> float:
        """Total primary energy (ren + nren)."""
        return self.ren + self.nren

    def rer(self) -> float:
        """Renewable energy ratio, ren / tot, or 0 when the total is 0."""
        total = self.tot()
        if total == 0.0:
            return 0.0
        return self.ren / total

    def __add__(self, other: "RenNrenCo2") -> "RenNrenCo2":
        return RenNrenCo2(self.ren + other.ren, self.nren + other.nren, self.co2 + other.co2)

    def __sub__(self, other: "RenNrenCo2") -> "RenNrenCo2":
        return RenNrenCo2(self.ren - other.ren, self.nren - other.nren, self.co2 - other.co2)

    def __mul__(self, k: Union[int, float]) -> "RenNrenCo2":
        return RenNrenCo2(self.ren * k, self.nren * k, self.co2 * k)

    __rmul__ = __mul__

    def __neg__(self) -> "RenNrenCo2":
        return RenNrenCo2(-self.ren, -self.nren, -self.co2)

    def __str__(self) -> str:
        return f"ren: {self.ren:.3f}, nren: {self.nren:.3f}, co2: {self.co2:.3f}"

    @classmethod
    def zero(cls) -> "RenNrenCo2":
        """Zero triple."""
        return cls(0.0, 0.0, 0.0)
