"""
Query contracts for the external data providers.

The table builder never reads physics databases directly. It sends one
CrossSectionRequest per species and grid and receives an immutable
CrossSectionData value; photoabsorption data is looked up per species and
energy through an OpticalDataProvider.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, Union, runtime_checkable

from gasmix_mc.core.exceptions import DataInconsistency


@dataclass(frozen=True)
class CrossSectionRequest:
    """
    Cross sections of one species on an energy grid.

    Attributes:
        species: Canonical species name (as returned by resolve)
        energies: Energies at which to evaluate the cross sections [eV]
        anisotropic: Request angular distribution parameters
    """
    species: str
    energies: np.ndarray
    anisotropic: bool = True


@dataclass(frozen=True)
class CrossSectionData:
    """
    Provider response for one species.

    Cross sections are in cm^2, one row per channel and one column per
    requested energy. Angular parameters (par arrays) follow the same
    layout and are interpreted according to the channel's scattering
    model. At least one attachment row is always present (zeros if the
    species does not attach).

    inelastic_categories optionally carries an explicit category name
    ("EXCITATION", "INELASTIC", "SUPERELASTIC") per inelastic channel;
    None entries fall back to classification by description.
    """
    species: str
    mass_ratio: float
    elastic: np.ndarray
    elastic_par: np.ndarray
    elastic_model: int
    ionisation: np.ndarray
    ionisation_par: np.ndarray
    ionisation_thresholds: np.ndarray
    ionisation_model: int
    opal_beaty: np.ndarray
    attachment: np.ndarray
    inelastic: np.ndarray
    inelastic_par: np.ndarray
    inelastic_thresholds: np.ndarray
    inelastic_models: np.ndarray
    elastic_description: str = "ELASTIC"
    ionisation_descriptions: Tuple[str, ...] = ()
    attachment_descriptions: Tuple[str, ...] = ()
    inelastic_descriptions: Tuple[str, ...] = ()
    inelastic_categories: Optional[Tuple[Optional[str], ...]] = None

    @property
    def n_energies(self) -> int:
        return len(self.elastic)

    @property
    def n_ionisation(self) -> int:
        return len(self.ionisation_thresholds)

    @property
    def n_attachment(self) -> int:
        return self.attachment.shape[0]

    @property
    def n_inelastic(self) -> int:
        return len(self.inelastic_thresholds)

    def validate(self):
        """Raise DataInconsistency if array shapes disagree."""
        n = self.n_energies
        checks = [
            ('elastic_par', self.elastic_par.shape, (n,)),
            ('ionisation', self.ionisation.shape, (self.n_ionisation, n)),
            ('ionisation_par', self.ionisation_par.shape, (self.n_ionisation, n)),
            ('opal_beaty', self.opal_beaty.shape, (self.n_ionisation,)),
            ('inelastic', self.inelastic.shape, (self.n_inelastic, n)),
            ('inelastic_par', self.inelastic_par.shape, (self.n_inelastic, n)),
            ('inelastic_models', self.inelastic_models.shape, (self.n_inelastic,)),
        ]
        for name, got, expected in checks:
            if got != expected:
                raise DataInconsistency(
                    f"{self.species}: {name} has shape {got}, expected {expected}")
        if self.attachment.ndim != 2 or self.attachment.shape[1] != n or self.n_attachment < 1:
            raise DataInconsistency(
                f"{self.species}: attachment has shape {self.attachment.shape}")
        if len(self.inelastic_descriptions) != self.n_inelastic:
            raise DataInconsistency(f"{self.species}: missing inelastic descriptions")
        if (self.inelastic_categories is not None
                and len(self.inelastic_categories) != self.n_inelastic):
            raise DataInconsistency(f"{self.species}: inelastic category count mismatch")


@runtime_checkable
class CrossSectionProvider(Protocol):
    """Supplier of electron cross sections and kinematic constants."""

    def resolve(self, name: str) -> Optional[str]:
        """Return the canonical species name, or None if unknown."""
        ...

    def query_cross_sections(self, request: CrossSectionRequest) -> CrossSectionData:
        ...


@runtime_checkable
class OpticalDataProvider(Protocol):
    """Supplier of photoabsorption cross sections and ionisation yields."""

    def is_available(self, name: str) -> bool:
        ...

    def photoabsorption(self, name: str, energy: Union[float, np.ndarray]
                        ) -> Tuple[Union[float, np.ndarray], Union[float, np.ndarray]]:
        """
        Photoabsorption cross section [cm^2] and ionisation yield.

        Accepts a scalar energy or an array of energies [eV].
        """
        ...
