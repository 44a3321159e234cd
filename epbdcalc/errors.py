"""Error types raised by the energy performance calculation."""

# clean


class EpbdError(ValueError):

    """Base class for every error raised by epbdcalc."""


class WrongInput(EpbdError):

    """A structural precondition of the input data is violated."""


class MissingFactor(EpbdError):

    """A weighting factor needed for the calculation is not defined."""

    def __init__(self, description: str) -> None:
        """Initializes the error with a description of the missing factor."""
        super().__init__(f"Missing weighting factor: {description}")
        self.description = description


class ParseError(EpbdError):

    """A record could not be built from its serialized representation."""
