"""Exception hierarchy for table building and sampling."""


class GasMixError(RuntimeError):
    """Base class for all gasmix_mc errors."""


class ConfigurationError(GasMixError, ValueError):
    """
    Invalid mixture definition or parameter.

    Raised for unresolved species names, out-of-range probabilities or
    energies, per-species settings for a species not in the mixture, and
    mixtures exceeding the level cap.
    """


class TableStaleError(GasMixError):
    """No valid compiled tables are available and a rebuild failed."""


class RangeExceeded(GasMixError):
    """Requested energy lies beyond the current table range."""

    def __init__(self, energy: float, limit: float):
        super().__init__(f"Energy {energy:g} eV exceeds the table range ({limit:g} eV)")
        self.energy = energy
        self.limit = limit


class DataInconsistency(GasMixError):
    """Inconsistent provider or channel data (recovered locally)."""


class InvalidEnergy(GasMixError, ValueError):
    """Non-positive particle energy."""
