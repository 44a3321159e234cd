"""Metadata entries shared by components and weighting factors."""

# clean

from dataclasses import dataclass
from typing import List, Optional

from dataclasses_json import dataclass_json

from epbdcalc.rennrenco2 import RenNrenCo2


@dataclass_json
@dataclass
class Meta:

    """Key, value metadata pair."""

    key: str
    value: str


class MetaVec:

    """Metadata access for classes holding a list of Meta entries.

    Subclasses implement get_metavec.
    """

    def get_metavec(self) -> List[Meta]:
        """Return the list of metadata entries."""
        raise NotImplementedError

    def has_meta(self, key: str) -> bool:
        """Check whether a metadata key exists."""
        return any(meta.key == key for meta in self.get_metavec())

    def get_meta(self, key: str) -> Optional[str]:
        """Return the value of a metadata key or None."""
        for meta in self.get_metavec():
            if meta.key == key:
                return meta.value
        return None

    def get_meta_float(self, key: str) -> Optional[float]:
        """Return the value of a metadata key as a float, or None if missing or not a number."""
        value = self.get_meta(key)
        if value is None:
            return None
        try:
            return float(value)
        except ValueError:
            return None

    def get_meta_rennrenco2(self, key: str) -> Optional[RenNrenCo2]:
        """Return a 'ren, nren, co2' metadata value as a RenNrenCo2."""
        value = self.get_meta(key)
        if value is None:
            return None
        try:
            ren, nren, co2 = [float(part) for part in value.split(",")]
        except ValueError:
            return None
        return RenNrenCo2(ren, nren, co2)

    def set_meta(self, key: str, value: str) -> None:
        """Update a metadata key or append it."""
        for meta in self.get_metavec():
            if meta.key == key:
                meta.value = value
                return
        self.get_metavec().append(Meta(key, value))
