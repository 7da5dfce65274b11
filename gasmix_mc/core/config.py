"""
Mixture configuration snapshot.

A MixtureConfig is immutable; the medium replaces it on every setter call
and the table builder is a pure function of it. Configurations can also be
loaded from YAML:

    composition:
      Ar: 90.
      CO2: 10.
    temperature: 293.15
    pressure: 760.
    max_electron_energy: 40.
    deexcitation: true
"""

import yaml
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Mapping, Tuple, Union

from gasmix_mc.core.constants import SMALL
from gasmix_mc.core.exceptions import ConfigurationError
from gasmix_mc.core.types import SplittingFunction


@dataclass(frozen=True)
class MixtureConfig:
    """
    Frozen set of parameters from which the tables are compiled.

    Attributes:
        composition: (species name, fraction) pairs, fractions summing to 1
        temperature: Gas temperature [K]
        pressure: Gas pressure [Torr]
        max_electron_energy: Upper end of the electron tables [eV]
        max_photon_energy: Upper end of the photon table [eV]
        anisotropic: Use the providers' angular distributions
        splitting: Secondary electron energy model
        deexcitation: Simulate deexcitation cascades
        radiation_trapping: Include discrete absorption lines in the photon table
        penning: Simplified Penning transfer
        penning_r: Global Penning transfer probability
        penning_lambda: Global Penning transfer distance [cm]
        penning_species: Per-species (name, r, lambda) overrides
        excitation_scaling: Per-species (name, factor) scaling of inelastic rates
        auto_adjust: Extend the energy range when a larger energy is queried
    """
    composition: Tuple[Tuple[str, float], ...] = (('Ar', 1.),)
    temperature: float = 293.15
    pressure: float = 760.
    max_electron_energy: float = 40.
    max_photon_energy: float = 20.
    anisotropic: bool = True
    splitting: SplittingFunction = SplittingFunction.OPAL_BEATY
    deexcitation: bool = False
    radiation_trapping: bool = True
    penning: bool = False
    penning_r: float = 0.
    penning_lambda: float = 0.
    penning_species: Tuple[Tuple[str, float, float], ...] = ()
    excitation_scaling: Tuple[Tuple[str, float], ...] = ()
    auto_adjust: bool = True

    def __post_init__(self):
        if not self.composition:
            raise ConfigurationError("Mixture has no components")
        if self.temperature <= 0.:
            raise ConfigurationError(f"Temperature must be positive, got {self.temperature}")
        if self.pressure <= 0.:
            raise ConfigurationError(f"Pressure must be positive, got {self.pressure}")
        if self.max_electron_energy <= SMALL:
            raise ConfigurationError(
                f"Max. electron energy ({self.max_electron_energy} eV) is too small")
        if self.max_photon_energy <= SMALL:
            raise ConfigurationError(
                f"Max. photon energy ({self.max_photon_energy} eV) is too small")
        if self.penning and self.deexcitation:
            raise ConfigurationError(
                "Penning transfer and deexcitation handling are mutually exclusive")
        if not 0. <= self.penning_r <= 1.:
            raise ConfigurationError("Transfer probability must be in the range [0, 1]")
        for name, r, _ in self.penning_species:
            if not 0. <= r <= 1.:
                raise ConfigurationError(
                    f"Transfer probability for {name} must be in the range [0, 1]")
        for name, factor in self.excitation_scaling:
            if factor <= 0.:
                raise ConfigurationError(f"Incorrect scaling factor for {name}: {factor}")

    @property
    def species(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.composition)

    @property
    def fractions(self) -> Tuple[float, ...]:
        return tuple(f for _, f in self.composition)

    def with_changes(self, **changes) -> 'MixtureConfig':
        return replace(self, **changes)

    @staticmethod
    def normalise_composition(composition) -> Tuple[Tuple[str, float], ...]:
        """
        Validate and normalise a species -> fraction mapping.

        Fractions may be given in any unit (e.g. percent); they are rescaled
        to sum to one.
        """
        if not isinstance(composition, Mapping):
            composition = dict(composition)
        if not composition:
            raise ConfigurationError("Mixture has no components")
        total = 0.
        for name, fraction in composition.items():
            if fraction <= 0.:
                raise ConfigurationError(f"Fraction of {name} must be positive, got {fraction}")
            total += fraction
        return tuple((str(name), float(f) / total) for name, f in composition.items())

    @classmethod
    def from_dict(cls, data: Mapping) -> 'MixtureConfig':
        """Build a configuration from a plain mapping (e.g. parsed YAML)."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

        kwargs = dict(data)
        if 'composition' in kwargs:
            kwargs['composition'] = cls.normalise_composition(kwargs['composition'])
        if 'splitting' in kwargs:
            splitting = kwargs['splitting']
            if isinstance(splitting, str):
                try:
                    splitting = SplittingFunction[splitting.upper().replace('-', '_')]
                except KeyError:
                    raise ConfigurationError(f"Unknown splitting function '{splitting}'") from None
            kwargs['splitting'] = SplittingFunction(splitting)
        if 'penning_species' in kwargs:
            entries = kwargs['penning_species']
            if isinstance(entries, Mapping):
                entries = [(name, v['r'], v.get('lambda', 0.)) for name, v in entries.items()]
            kwargs['penning_species'] = tuple(
                (str(n), float(r), float(lam) if lam >= SMALL else 0.) for n, r, lam in entries)
        if 'excitation_scaling' in kwargs:
            entries = kwargs['excitation_scaling']
            if isinstance(entries, Mapping):
                entries = entries.items()
            kwargs['excitation_scaling'] = tuple((str(n), float(f)) for n, f in entries)
        for key in ('temperature', 'pressure', 'max_electron_energy', 'max_photon_energy',
                    'penning_r', 'penning_lambda'):
            if key in kwargs:
                kwargs[key] = float(kwargs[key])
        if kwargs.get('penning_lambda', 0.) < SMALL:
            kwargs['penning_lambda'] = 0.
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'MixtureConfig':
        """Load a configuration from a YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"{path}: expected a mapping at the top level")
        return cls.from_dict(data)
