"""
Gas medium facade.

GasMedium owns the mixture configuration, the compiled tables, the
collision counters, the shared random stream and the deexcitation
product list. Every setter replaces the frozen configuration snapshot and
bumps its version; the tables are rebuilt lazily on the next query whose
version differs.

Usage:
    gas = GasMedium()
    gas.set_composition({'Ar': 90., 'CO2': 10.})
    gas.set_max_electron_energy(100.)
    gas.initialise()
    collision = gas.sample_electron_collision(20., (0., 0., 1.))
"""

import logging
import numpy as np
from typing import Mapping, Optional, Sequence, Tuple, Union

from gasmix_mc.core.config import MixtureConfig
from gasmix_mc.core.constants import SMALL
from gasmix_mc.core.exceptions import (
    ConfigurationError,
    GasMixError,
    InvalidEnergy,
    RangeExceeded,
    TableStaleError,
)
from gasmix_mc.core.rng import RandomStream
from gasmix_mc.core.types import (
    CollisionCounters,
    CollisionType,
    ElectronCollision,
    Level,
    PhotonCollision,
    Product,
    SplittingFunction,
    products_to_array,
)
from gasmix_mc.physics.model_gas import ModelGasDatabase, ModelOpticalData
from gasmix_mc.physics.providers import CrossSectionProvider, OpticalDataProvider
from gasmix_mc.transport.deexcitation import DeexcitationEngine
from gasmix_mc.transport.photon import PhotonCollisionTable
from gasmix_mc.transport.sampler import CollisionSampler
from gasmix_mc.transport.tables import CompiledTables, MixtureTableBuilder

logger = logging.getLogger(__name__)

# Factor applied to an out-of-range energy when the range is extended
RANGE_EXTENSION = 1.05


class GasMedium:
    """
    Electron and photon collision properties of a gas mixture.

    Parameters:
        provider: Cross-section provider (default: ModelGasDatabase)
        optical: Photoabsorption provider (default: ModelOpticalData)
        config: Initial configuration (default: pure argon at NTP)
        seed: Seed of the random stream
        rng: Shared random stream (overrides seed)
    """

    def __init__(self, provider: Optional[CrossSectionProvider] = None,
                 optical: Optional[OpticalDataProvider] = None,
                 config: Optional[MixtureConfig] = None,
                 seed: Optional[int] = None,
                 rng: Optional[RandomStream] = None):
        self.provider = provider if provider is not None else ModelGasDatabase()
        self.optical = optical if optical is not None else ModelOpticalData()
        self.builder = MixtureTableBuilder(self.provider, self.optical)
        self.rng = rng if rng is not None else RandomStream(seed)
        self.counters = CollisionCounters()

        self._config = config if config is not None else MixtureConfig()
        self._version = 1
        self._tables: Optional[CompiledTables] = None
        self._engine = DeexcitationEngine((), 0., self.rng, self.counters)
        self._sampler: Optional[CollisionSampler] = None

    @classmethod
    def from_config(cls, config: Union[MixtureConfig, str], **kwargs) -> 'GasMedium':
        """Create a medium from a configuration snapshot or a YAML file path."""
        if not isinstance(config, MixtureConfig):
            config = MixtureConfig.from_yaml(config)
        return cls(config=config, **kwargs)

    def __repr__(self) -> str:
        mix = ", ".join(f"{name} {100. * f:.4g}%" for name, f in self._config.composition)
        return f"GasMedium({mix}, T={self._config.temperature} K, p={self._config.pressure} Torr)"

    # ------------------------------------------------------------------
    # Configuration

    @property
    def config(self) -> MixtureConfig:
        return self._config

    @property
    def version(self) -> int:
        return self._version

    @property
    def tables(self) -> Optional[CompiledTables]:
        """Most recently compiled tables (may be stale)."""
        return self._tables

    def _update(self, **changes):
        config = self._config.with_changes(**changes)
        if config != self._config:
            self._config = config
            self._version += 1

    def _mixture_name(self, gas: str) -> str:
        """Name under which a species appears in the current composition."""
        canonical = self.provider.resolve(gas)
        if canonical is not None:
            for name in self._config.species:
                if self.provider.resolve(name) == canonical:
                    return name
        raise ConfigurationError(f"Specified gas ({gas}) is not part of the present mixture")

    def set_composition(self, composition: Union[Mapping[str, float], Sequence[Tuple[str, float]]]):
        """
        Set the species and their fractions.

        Fractions are normalised to sum to one. Per-species Penning and
        excitation scaling settings are reset.
        """
        pairs = MixtureConfig.normalise_composition(composition)
        resolved = []
        for name, fraction in pairs:
            canonical = self.provider.resolve(name)
            if canonical is None:
                raise ConfigurationError(f"Gas {name} is not available")
            if canonical in (n for n, _ in resolved):
                raise ConfigurationError(f"Gas {canonical} is specified more than once")
            resolved.append((canonical, fraction))
        self._update(composition=tuple(resolved), penning_species=(), excitation_scaling=())

    def set_temperature(self, temperature: float):
        if temperature <= 0.:
            raise ConfigurationError(f"Temperature must be positive, got {temperature}")
        self._update(temperature=float(temperature))

    def set_pressure(self, pressure: float):
        if pressure <= 0.:
            raise ConfigurationError(f"Pressure must be positive, got {pressure}")
        self._update(pressure=float(pressure))

    def set_max_electron_energy(self, e_max: float):
        if e_max <= SMALL:
            raise ConfigurationError(f"Provided upper electron energy limit ({e_max} eV) is too small")
        self._update(max_electron_energy=float(e_max))

    def set_max_photon_energy(self, e_max: float):
        if e_max <= SMALL:
            raise ConfigurationError(f"Provided upper photon energy limit ({e_max} eV) is too small")
        self._update(max_photon_energy=float(e_max))

    def enable_anisotropic_scattering(self):
        self._update(anisotropic=True)

    def disable_anisotropic_scattering(self):
        self._update(anisotropic=False)

    def set_splitting_function_opal_beaty(self):
        self._update(splitting=SplittingFunction.OPAL_BEATY)

    def set_splitting_function_green_sawada(self):
        self._update(splitting=SplittingFunction.GREEN_SAWADA)

    def set_splitting_function_flat(self):
        self._update(splitting=SplittingFunction.FLAT)

    def enable_deexcitation(self):
        """Simulate deexcitation cascades; switches simplified Penning transfer off."""
        if self._config.penning:
            logger.info("Penning transfer will be switched off")
        self._update(deexcitation=True, penning=False)
        self._engine.clear()

    def disable_deexcitation(self):
        self._update(deexcitation=False)

    def enable_radiation_trapping(self):
        if not self._config.deexcitation:
            logger.info("Radiation trapping has no effect unless deexcitation is enabled")
        self._update(radiation_trapping=True)

    def disable_radiation_trapping(self):
        self._update(radiation_trapping=False)

    def enable_penning_transfer(self, r: float, lambda_: float = 0., gas: Optional[str] = None):
        """
        Switch on simplified Penning transfer.

        Parameters:
            r: Transfer probability
            lambda_: Transfer distance [cm]
            gas: Restrict the setting to one species of the mixture
        """
        if not 0. <= r <= 1.:
            raise ConfigurationError("Transfer probability must be in the range [0, 1]")
        lam = float(lambda_) if lambda_ >= SMALL else 0.
        if self._config.deexcitation:
            logger.info("Deexcitation handling will be switched off")
        if gas is None:
            self._update(penning=True, penning_r=float(r), penning_lambda=lam, deexcitation=False)
            logger.info("Global Penning transfer parameters set to r = %g, lambda = %g cm", r, lam)
            return
        name = self._mixture_name(gas)
        entries = tuple(e for e in self._config.penning_species if e[0] != name)
        self._update(penning=True, deexcitation=False,
                     penning_species=entries + ((name, float(r), lam),))
        logger.info("Penning transfer parameters for %s set to r = %g, lambda = %g cm",
                    name, r, lam)

    def disable_penning_transfer(self, gas: Optional[str] = None):
        if gas is None:
            self._update(penning=False, penning_r=0., penning_lambda=0., penning_species=())
            return
        name = self._mixture_name(gas)
        entries = tuple(e for e in self._config.penning_species if e[0] != name)
        remaining = self._config.penning_r > SMALL or any(r > SMALL for _, r, _ in entries)
        self._update(penning_species=entries, penning=self._config.penning and remaining)
        if not remaining:
            logger.info("Penning transfer switched off")

    def set_excitation_scaling_factor(self, gas: str, factor: float):
        """Scale the inelastic cross sections of one species."""
        if factor <= 0.:
            raise ConfigurationError(f"Incorrect scaling factor for {gas}: {factor}")
        name = self._mixture_name(gas)
        entries = tuple(e for e in self._config.excitation_scaling if e[0] != name)
        self._update(excitation_scaling=entries + ((name, float(factor)),))

    def enable_energy_range_adjustment(self):
        self._update(auto_adjust=True)

    def disable_energy_range_adjustment(self):
        self._update(auto_adjust=False)

    # ------------------------------------------------------------------
    # Tables

    def initialise(self) -> bool:
        """
        Compile the tables for the current configuration.

        Skipped when the tables already match the configuration version.
        On failure the previous tables are kept.

        Returns:
            True if up-to-date tables are available
        """
        if self._tables is not None and self._tables.version == self._version:
            logger.debug("Tables are up to date (version %d)", self._version)
            return True
        try:
            tables = self.builder.build(self._config, self._version)
        except GasMixError as err:
            logger.error("Building the collision rate tables failed: %s", err)
            return False
        self._install(tables)
        return True

    def _install(self, tables: CompiledTables):
        self._tables = tables
        self.counters.reset(tables.n_levels)
        self._engine = DeexcitationEngine(tables.channels, tables.min_ion_potential,
                                          self.rng, self.counters)
        self._sampler = CollisionSampler(tables, self.rng, self.counters, self._engine)

    def _require_tables(self) -> CompiledTables:
        if not self.initialise():
            raise TableStaleError("No valid collision rate tables for the current configuration")
        return self._tables

    def _electron_tables(self, energy: float) -> CompiledTables:
        """Tables covering an electron energy, extending the range if allowed."""
        tables = self._require_tables()
        try:
            tables.grid.locate(energy, strict=True)
        except RangeExceeded as err:
            if not self._config.auto_adjust:
                return tables
            logger.info("%s; increasing energy range to %g eV", err, RANGE_EXTENSION * energy)
            self.set_max_electron_energy(RANGE_EXTENSION * energy)
            tables = self._require_tables()
        return tables

    def _photon_table(self, energy: float) -> PhotonCollisionTable:
        tables = self._require_tables()
        if energy > self._config.max_photon_energy and self._config.auto_adjust:
            logger.info("Photon energy %g eV exceeds the table range; increasing range to %g eV",
                        energy, RANGE_EXTENSION * energy)
            self.set_max_photon_energy(RANGE_EXTENSION * energy)
            tables = self._require_tables()
        if tables.photon is None:
            raise ConfigurationError("Photon collision rates are not available for this mixture")
        return tables.photon

    @property
    def n_levels(self) -> int:
        return self._require_tables().n_levels

    def get_level(self, i: int) -> Level:
        tables = self._require_tables()
        if i < 0 or i >= tables.n_levels:
            raise IndexError(f"Level {i} does not exist ({tables.n_levels} levels)")
        return tables.levels[i]

    # ------------------------------------------------------------------
    # Electrons

    def get_electron_null_collision_rate(self) -> float:
        """Upper bound of the total collision rate over the table range [ns^-1]."""
        return self._require_tables().null_rate

    def get_electron_collision_rate(self, energy: float, level: Optional[int] = None) -> float:
        """
        Total collision rate, or the rate of one level [ns^-1].

        Non-positive energies return the first-bin value with a warning.
        """
        if energy <= 0.:
            logger.warning("Electron energy must be greater than zero")
            tables = self._require_tables()
        else:
            tables = self._electron_tables(energy)
        rate = tables.grid.total_rate(energy)
        if level is None:
            return rate
        if level < 0 or level >= tables.n_levels:
            raise IndexError(f"Level {level} does not exist ({tables.n_levels} levels)")
        return rate * tables.grid.level_fraction(energy, level)

    def sample_electron_collision(self, energy: float,
                                  direction: Sequence[float] = (0., 0., 1.)) -> ElectronCollision:
        """
        Sample a collision of an electron with the given energy and direction.

        Raises:
            InvalidEnergy: energy <= 0
        """
        if energy <= 0.:
            raise InvalidEnergy(f"Electron energy must be greater than zero, got {energy}")
        self._electron_tables(energy)
        return self._sampler.sample(energy, np.asarray(direction, dtype=np.float64))

    def compute_deexcitation(self, level: int) -> int:
        """
        Run a cascade starting from an excitation level.

        Returns:
            Level index where the cascade ended, -1 for a synthetic state
            or an excitation lost in a collision
        """
        if not self._config.deexcitation:
            raise ConfigurationError("Deexcitation is not enabled")
        tables = self._require_tables()
        if level < 0 or level >= tables.n_levels:
            raise IndexError(f"Level {level} does not exist ({tables.n_levels} levels)")
        if not tables.deexcitation:
            raise ConfigurationError("Deexcitation handling is switched off for this mixture")
        channel = int(tables.level_channel[level])
        if channel < 0:
            raise ConfigurationError(f"Level {level} is not deexcitable")
        final = self._engine.run(channel)
        if 0 <= final < len(tables.channels):
            return tables.channels[final].level
        return -1

    # ------------------------------------------------------------------
    # Photons

    def get_photon_collision_rate(self, energy: float) -> float:
        """Photon absorption rate [ns^-1]."""
        if energy <= 0.:
            logger.warning("Photon energy must be greater than zero")
            return float(self._photon_table(SMALL).total[0])
        return self._photon_table(energy).rate(energy)

    def sample_photon_collision(self, energy: float) -> PhotonCollision:
        if energy <= 0.:
            raise InvalidEnergy(f"Photon energy must be greater than zero, got {energy}")
        photon = self._photon_table(energy)
        tables = self._tables
        engine = self._engine if tables.deexcitation else None
        self._engine.clear()
        return photon.sample(energy, self.rng, self.counters, engine)

    # ------------------------------------------------------------------
    # Deexcitation products and counters

    @property
    def n_deexcitation_products(self) -> int:
        return len(self._engine.products)

    def get_deexcitation_product(self, i: int) -> Product:
        if not (self._config.deexcitation or self._config.penning):
            raise IndexError("Neither deexcitation nor Penning transfer is enabled")
        if i < 0 or i >= len(self._engine.products):
            raise IndexError(f"Product {i} does not exist "
                             f"({len(self._engine.products)} products)")
        return self._engine.products[i]

    def get_deexcitation_products(self) -> np.ndarray:
        """Copy of the current product list as a structured array."""
        return products_to_array(self._engine.products)

    def reset_collision_counters(self):
        self.counters.reset()

    def summary(self) -> str:
        """Human-readable description of the mixture and its tables."""
        cfg = self._config
        lines = [repr(self)]
        lines.append(f"  Electron energy range: 0 - {cfg.max_electron_energy:g} eV")
        lines.append(f"  Photon energy range:   0 - {cfg.max_photon_energy:g} eV")
        lines.append(f"  Splitting function:    {cfg.splitting.name}")
        lines.append(f"  Anisotropic scattering: {'on' if cfg.anisotropic else 'off'}")
        if cfg.penning:
            lines.append(f"  Penning transfer: r = {cfg.penning_r:g}, lambda = {cfg.penning_lambda:g} cm")
            for name, r, lam in cfg.penning_species:
                lines.append(f"    {name}: r = {r:g}, lambda = {lam:g} cm")
        tables = self._tables
        if tables is None or tables.version != self._version:
            lines.append("  Tables not compiled")
            return "\n".join(lines)
        lines.append(f"  Levels: {tables.n_levels}")
        for category in CollisionType:
            n = sum(1 for lvl in tables.levels if lvl.category == category)
            if n:
                lines.append(f"    {category.name.lower():<13s} {n:4d}")
        lines.append(f"  Lowest ionisation potential: {tables.min_ion_potential:.4g} eV")
        lines.append(f"  Null-collision rate: {tables.null_rate:.4g} ns-1")
        lines.append(f"  Deexcitation: {'on' if tables.deexcitation else 'off'}"
                     f" ({len(tables.channels)} channels)")
        if tables.photon is None:
            lines.append("  Photon table: not available")
        else:
            lines.append(f"  Photon table: {tables.photon.n_terms} terms, "
                         f"{tables.photon.n_lines} lines")
        return "\n".join(lines)
