""" Defines the calculation parameters: export factor, reference area and user weighting factors. """
# clean
import json
from dataclasses import dataclass, field, fields

from dataclass_wizard import JSONWizard

from epbdcalc import log
from epbdcalc.errors import WrongInput
from epbdcalc.factors import UserWF

# Default exported energy factor, k_exp
KEXP_DEFAULT = 0.0
# Default reference area, m2
AREAREF_DEFAULT = 1.0
# Minimum reference area accepted by the calculation
AREAREF_MIN = 1e-3


@dataclass
class CalculationConfig(JSONWizard):

    """Defines HOW the energy performance is evaluated."""

    # Exported energy factor [0, 1]
    k_exp: float = KEXP_DEFAULT
    # Reference area for energy performance ratios, m2
    arearef: float = AREAREF_DEFAULT
    # User defined weighting factors for district networks and cogeneration
    user_wf: UserWF = field(default_factory=UserWF)
    # Remove factors for export to non EPB uses
    strip_nepb: bool = False
    # Use the factor computed from the cogeneration inputs for exported cogenerated electricity
    use_cogen_export_factor: bool = False
    # Restrict the computed cogeneration factor to near-by carriers
    use_nearby_cogen_factor: bool = False

    @classmethod
    def get_default_config(cls) -> "CalculationConfig":
        """Default calculation parameters."""
        return CalculationConfig(k_exp=KEXP_DEFAULT, arearef=AREAREF_DEFAULT)

    @classmethod
    def load_from_json(cls, config_path: str) -> "CalculationConfig":
        """Read calculation parameters from a JSON file. Missing keys keep their default value."""
        log.information(f"Read calculation config from {config_path}.")
        with open(config_path, "r", encoding="utf8") as file:
            config_dict = json.loads(file.read())

        known_keys = {config_field.name for config_field in fields(cls)}
        for key in config_dict:
            if key not in known_keys:
                raise AttributeError(f"Attribute `{key}` from JSON cannot be found in `{cls.__name__}`.")

        config = cls.from_dict(config_dict)
        config.validate()
        return config

    def validate(self) -> None:
        """Check the parameter ranges. Raises WrongInput."""
        if self.arearef <= AREAREF_MIN:
            raise WrongInput(f"The reference area can not be zero or almost zero and {self.arearef} was found")
        if not 0.0 <= self.k_exp <= 1.0:
            raise WrongInput(f"The exported energy factor k_exp must be in [0, 1] and {self.k_exp} was found")
