"""
Electron scattering-rate tables for a gas mixture.

The builder queries the cross-section provider for every species on a
linear energy grid (and, above 10 keV, on a logarithmic grid), converts
cross sections to collision rates, and compiles per-bin cumulative
probability vectors over the mixture's scattering levels. The result is
an immutable CompiledTables snapshot tagged with the configuration
version it was built from.

Workflow:
    builder = MixtureTableBuilder(ModelGasDatabase(), ModelOpticalData())
    tables = builder.build(config, version=1)
    rate = tables.grid.total_rate(10.)
"""

import logging
import numpy as np
import numba
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from gasmix_mc.core.config import MixtureConfig
from gasmix_mc.core.constants import (
    ELECTRON_MASS,
    ENERGY_HIGH,
    ENERGY_HIGH_LOG,
    N_ENERGY_STEPS,
    N_ENERGY_STEPS_LOG,
    N_MAX_LEVELS,
    RELATIVISTIC_THRESHOLD,
    SMALL,
    SPEED_OF_LIGHT,
    number_density,
)
from gasmix_mc.core.exceptions import ConfigurationError, DataInconsistency, RangeExceeded
from gasmix_mc.core.types import CollisionType, Level, SplittingFunction
from gasmix_mc.physics.kinematics import scattering_parameters_array
from gasmix_mc.physics.providers import (
    CrossSectionData,
    CrossSectionProvider,
    CrossSectionRequest,
    OpticalDataProvider,
)
from gasmix_mc.physics.spectroscopy import GREEN_SAWADA, GREEN_SAWADA_TA
from gasmix_mc.transport.deexcitation import DeexcitationChannel, build_deexcitation_channels
from gasmix_mc.transport.photon import PhotonCollisionTable

logger = logging.getLogger(__name__)


@numba.njit(cache=True)
def accumulate_rates(rates: np.ndarray) -> Tuple[np.ndarray, np.ndarray, int]:
    """
    Turn per-level rates into cumulative probability vectors.

    Negative rates are clamped to zero. Bins with a positive total are
    normalised so the last entry is one.

    Parameters:
        rates: Collision rates, shape (n_bins, n_levels)

    Returns:
        (cumulative, total, number of clamped entries)
    """
    n_bins, n_levels = rates.shape
    cumulative = np.empty((n_bins, n_levels))
    total = np.zeros(n_bins)
    n_clamped = 0
    for i in range(n_bins):
        s = 0.
        for j in range(n_levels):
            r = rates[i, j]
            if r < 0.:
                r = 0.
                n_clamped += 1
            s += r
            cumulative[i, j] = s
        total[i] = s
        if s > 0.:
            for j in range(n_levels):
                cumulative[i, j] /= s
    return cumulative, total, n_clamped


def relativistic_factor(ekin: np.ndarray) -> np.ndarray:
    """
    Velocity correction sqrt(1 + re/2) / (1 + re) above 1 keV, one below.

    Multiplied by sqrt(2 E / m_e) c this is the relativistic electron velocity.
    """
    re = ekin / ELECTRON_MASS
    factor = np.sqrt(1. + 0.5 * re) / (1. + re)
    return np.where(ekin > RELATIVISTIC_THRESHOLD, factor, 1.)


@dataclass(frozen=True)
class EnergyGrid:
    """
    Linear (and optional logarithmic) rate tables.

    Attributes:
        e_final: Upper end of the tables [eV]
        e_step: Linear bin width [eV]
        cumulative: Cumulative level probabilities, (N_ENERGY_STEPS, n_levels)
        total: Total collision rate per linear bin [ns^-1]
        cut, par: Angular cut and parameter per bin and level
        r_log: Ratio between consecutive log-grid bin edges (0 if unused)
        cumulative_log, log_total, cut_log, par_log: Log-grid counterparts;
            log_total holds ln(rate)
    """
    e_final: float
    e_step: float
    cumulative: np.ndarray
    total: np.ndarray
    cut: np.ndarray
    par: np.ndarray
    r_log: float = 0.
    cumulative_log: Optional[np.ndarray] = None
    log_total: Optional[np.ndarray] = None
    cut_log: Optional[np.ndarray] = None
    par_log: Optional[np.ndarray] = None

    @property
    def has_log_grid(self) -> bool:
        return self.log_total is not None

    @property
    def ln_step(self) -> float:
        return np.log(self.r_log) if self.r_log > 0. else 0.

    @property
    def n_levels(self) -> int:
        return self.cumulative.shape[1]

    def locate(self, energy: float, strict: bool = False) -> Tuple[bool, int]:
        """
        Bin of an energy.

        Parameters:
            energy: Electron energy [eV]
            strict: Raise RangeExceeded above e_final instead of clamping

        Returns:
            (on_log_grid, bin index)
        """
        if strict and energy > self.e_final:
            raise RangeExceeded(energy, self.e_final)
        if energy <= ENERGY_HIGH or not self.has_log_grid:
            i = min(max(int(energy / self.e_step), 0), N_ENERGY_STEPS - 1)
            return False, i
        i = int(np.log(energy / ENERGY_HIGH) / self.ln_step)
        return True, min(max(i, 0), N_ENERGY_STEPS_LOG - 1)

    def bin_arrays(self, on_log: bool, i: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Cumulative vector, cuts and parameters of one bin."""
        if on_log:
            return self.cumulative_log[i], self.cut_log[i], self.par_log[i]
        return self.cumulative[i], self.cut[i], self.par[i]

    def total_rate(self, energy: float) -> float:
        """
        Total collision rate [ns^-1].

        Log-grid rates are interpolated log-log between neighbouring bins;
        the first log bin interpolates from the last linear bin. Energies above
        e_final get the rate of the last bin.
        """
        on_log, i = self.locate(energy)
        if not on_log:
            return float(self.total[i])
        if energy >= self.e_final:
            return float(np.exp(self.log_total[-1]))
        e_log = np.log(energy)
        fmax = self.log_total[i]
        fmin = self.log_total[i - 1] if i > 0 else np.log(max(self.total[-1], SMALL))
        emin = ENERGY_HIGH_LOG + i * self.ln_step
        return float(np.exp(fmin + (e_log - emin) * (fmax - fmin) / self.ln_step))

    def level_fraction(self, energy: float, level: int) -> float:
        """Probability of a level at the given energy."""
        on_log, i = self.locate(energy)
        cum = self.cumulative_log[i] if on_log else self.cumulative[i]
        if level == 0:
            return float(cum[0])
        return float(cum[level] - cum[level - 1])


@dataclass(frozen=True)
class CompiledTables:
    """
    Everything the samplers need, compiled from one configuration.

    Attributes:
        version: Configuration version the tables were built from
        config: The configuration snapshot
        species: Canonical species names, in mixture order
        levels: Scattering levels in construction order
        grid: Electron rate tables
        recoil: Recoil factor 1 + m_e / M per species
        ion_potential: First ionisation threshold per species [eV]
        min_ion_potential: Lowest ionisation potential in the mixture [eV]
        null_rate: Null-collision rate [ns^-1]
        penning_r, penning_lambda: Penning parameters per level
        green_sawada: (Gs, Gb, Ts, Ta, Tb) per species
        has_green_sawada: Fit available per species
        channels: Deexcitation channels (empty if disabled)
        level_channel: Channel index per level, -1 if none
        photon: Photon absorption table, None if unavailable
        deexcitation: Effective deexcitation switch after the build
        number_density: Gas number density [cm^-3]
    """
    version: int
    config: MixtureConfig
    species: Tuple[str, ...]
    levels: Tuple[Level, ...]
    grid: EnergyGrid
    recoil: np.ndarray
    ion_potential: np.ndarray
    min_ion_potential: float
    null_rate: float
    penning_r: np.ndarray
    penning_lambda: np.ndarray
    green_sawada: np.ndarray
    has_green_sawada: np.ndarray
    channels: Tuple[DeexcitationChannel, ...]
    level_channel: np.ndarray
    photon: Optional[PhotonCollisionTable]
    deexcitation: bool
    number_density: float

    @property
    def n_levels(self) -> int:
        return len(self.levels)

    @property
    def e_final(self) -> float:
        return self.grid.e_final


def classify_inelastic(data: CrossSectionData, j: int) -> CollisionType:
    """
    Category of one inelastic channel.

    An explicit provider tag wins. Otherwise a description with "EX" at
    offset 0 or 1 (or an N2 level above 6 eV) is an excitation, a negative
    threshold is superelastic and everything else is inelastic.
    """
    if data.inelastic_categories is not None and data.inelastic_categories[j]:
        return CollisionType[data.inelastic_categories[j].upper()]
    desc = data.inelastic_descriptions[j]
    threshold = data.inelastic_thresholds[j]
    if desc[1:3] == "EX" or desc[0:2] == "EX" or (data.species == "N2" and threshold > 6.):
        return CollisionType.EXCITATION
    if threshold < 0.:
        return CollisionType.SUPERELASTIC
    return CollisionType.INELASTIC


class MixtureTableBuilder:
    """
    Compile rate tables from a mixture configuration.

    The builder holds only the providers; build() is a pure function of
    the configuration snapshot.
    """

    def __init__(self, provider: CrossSectionProvider,
                 optical: Optional[OpticalDataProvider] = None):
        self.provider = provider
        self.optical = optical

    def resolve_species(self, config: MixtureConfig) -> Tuple[str, ...]:
        names = []
        for name in config.species:
            canonical = self.provider.resolve(name)
            if canonical is None:
                raise ConfigurationError(f"Gas {name} is not available")
            names.append(canonical)
        return tuple(names)

    def _query(self, species: str, energies: np.ndarray, anisotropic: bool) -> CrossSectionData:
        data = self.provider.query_cross_sections(
            CrossSectionRequest(species, energies, anisotropic))
        data.validate()
        return data

    def _collect_levels(self, igas: int, data: CrossSectionData, config: MixtureConfig,
                        n_existing: int) -> Tuple[list, list]:
        """
        Levels of one species and the index rows they take in the response.

        Returns:
            (levels, rows) where rows holds (kind, j) per level
        """
        n_ion = int(np.sum(data.ionisation_thresholds <= config.max_electron_energy))
        if n_existing + data.n_inelastic + n_ion + data.n_attachment >= N_MAX_LEVELS:
            raise ConfigurationError(
                f"Max. number of levels ({N_MAX_LEVELS}) exceeded when adding {data.species}")

        r = 1. + 0.5 * data.mass_ratio
        aniso = config.anisotropic
        levels = [Level(igas, CollisionType.ELASTIC, 0., 0.,
                        data.elastic_model if aniso else 0,
                        description=data.elastic_description)]
        rows = [('elastic', 0)]

        for j in range(data.n_ionisation):
            threshold = float(data.ionisation_thresholds[j])
            if threshold > config.max_electron_energy:
                continue
            desc = data.ionisation_descriptions[j] if j < len(data.ionisation_descriptions) else ""
            levels.append(Level(igas, CollisionType.IONISATION, threshold, threshold / r,
                                data.ionisation_model if aniso else 0,
                                w_opal_beaty=float(data.opal_beaty[j]), description=desc))
            rows.append(('ionisation', j))

        for j in range(data.n_attachment):
            desc = data.attachment_descriptions[j] if j < len(data.attachment_descriptions) else ""
            levels.append(Level(igas, CollisionType.ATTACHMENT, 0., 0., 0, description=desc))
            rows.append(('attachment', j))

        for j in range(data.n_inelastic):
            threshold = float(data.inelastic_thresholds[j])
            levels.append(Level(igas, classify_inelastic(data, j), threshold, threshold / r,
                                int(data.inelastic_models[j]) if aniso else 0,
                                description=data.inelastic_descriptions[j]))
            rows.append(('inelastic', j))
        return levels, rows

    @staticmethod
    def _rates_and_angles(data: CrossSectionData, levels: list, rows: list, van: float,
                          scale: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Rate, cut and parameter rows (levels x energies) of one species."""
        n = data.n_energies
        rates = np.empty((len(rows), n))
        cut = np.empty((len(rows), n))
        par = np.empty((len(rows), n))
        for k, ((kind, j), level) in enumerate(zip(rows, levels)):
            if kind == 'elastic':
                cs, p = data.elastic, data.elastic_par
            elif kind == 'ionisation':
                cs, p = data.ionisation[j], data.ionisation_par[j]
            elif kind == 'attachment':
                cs, p = data.attachment[j], np.full(n, 0.5)
            else:
                cs, p = data.inelastic[j], data.inelastic_par[j]
            row = cs * van
            if kind == 'inelastic':
                row = row * scale
                if np.any(row < 0.):
                    logger.warning("Negative inelastic cross-section for level %s of %s; "
                                   "set to zero in %d bins", level.description.strip(),
                                   data.species, int(np.sum(row < 0.)))
                    row = np.maximum(row, 0.)
            rates[k] = row
            cut[k], par[k] = scattering_parameters_array(level.model,
                                                         np.ascontiguousarray(p, dtype=np.float64))
        return rates, cut, par

    def build(self, config: MixtureConfig, version: int = 0) -> CompiledTables:
        """
        Compile the tables for a configuration.

        Raises:
            ConfigurationError: Unknown species or too many levels
            DataInconsistency: Malformed provider response
        """
        species = self.resolve_species(config)
        dens = number_density(config.temperature, config.pressure)
        e_final = config.max_electron_energy
        e_step = min(e_final, ENERGY_HIGH) / N_ENERGY_STEPS
        energies = (np.arange(N_ENERGY_STEPS) + 0.5) * e_step

        use_log = e_final > ENERGY_HIGH
        r_log = (e_final / ENERGY_HIGH)**(1. / N_ENERGY_STEPS_LOG) if use_log else 0.
        energies_log = (ENERGY_HIGH * r_log**(np.arange(N_ENERGY_STEPS_LOG) + 1.)
                        if use_log else None)

        scaling = dict(config.excitation_scaling)
        levels = []
        rate_rows, cut_rows, par_rows = [], [], []
        rate_rows_log, cut_rows_log, par_rows_log = [], [], []
        recoil = np.empty(len(species))
        ion_potential = np.empty(len(species))

        for igas, (name, fraction) in enumerate(zip(species, config.fractions)):
            data = self._query(name, energies, config.anisotropic)
            recoil[igas] = 1. + 0.5 * data.mass_ratio
            ion_potential[igas] = (data.ionisation_thresholds[0]
                                   if data.n_ionisation > 0 else np.inf)
            gas_levels, rows = self._collect_levels(igas, data, config, len(levels))
            van = fraction * dens * SPEED_OF_LIGHT * np.sqrt(2. / ELECTRON_MASS)
            scale = scaling.get(config.species[igas], scaling.get(name, 1.))
            rates, cut, par = self._rates_and_angles(data, gas_levels, rows, van, scale)
            rate_rows.append(rates)
            cut_rows.append(cut)
            par_rows.append(par)

            if use_log:
                data_log = self._query(name, energies_log, config.anisotropic)
                rates, cut, par = self._rates_and_angles(data_log, gas_levels, rows, van, scale)
                rate_rows_log.append(rates)
                cut_rows_log.append(cut)
                par_rows_log.append(par)

            levels.extend(gas_levels)
            logger.info("%s: %d levels, ionisation potential %.4g eV",
                        name, len(gas_levels), ion_potential[igas])

        min_ion_potential = float(np.min(ion_potential))

        cumulative, total, n_clamped = accumulate_rates(
            np.ascontiguousarray(np.vstack(rate_rows).T))
        if n_clamped:
            logger.warning("%d negative collision rates set to zero", n_clamped)
        total = total * np.sqrt(energies) * relativistic_factor(energies)
        null_rate = float(total.max())

        grid_kwargs = {}
        if use_log:
            cumulative_log, total_log, n_clamped = accumulate_rates(
                np.ascontiguousarray(np.vstack(rate_rows_log).T))
            if n_clamped:
                logger.warning("%d negative collision rates set to zero (log grid)", n_clamped)
            # v = c sqrt(re (2 + re)) / (1 + re), as on the linear grid
            total_log = total_log * np.sqrt(energies_log) * relativistic_factor(energies_log)
            null_rate = max(null_rate, float(total_log.max()))
            grid_kwargs = dict(
                r_log=r_log,
                cumulative_log=cumulative_log,
                log_total=np.log(np.maximum(total_log, SMALL)),
                cut_log=np.vstack(cut_rows_log).T.copy(),
                par_log=np.vstack(par_rows_log).T.copy(),
            )
        grid = EnergyGrid(e_final, e_step, cumulative, total,
                          np.vstack(cut_rows).T.copy(), np.vstack(par_rows).T.copy(),
                          **grid_kwargs)
        logger.info("Built %d levels on %d%s bins up to %g eV; null-collision rate %.4g ns-1",
                    len(levels), N_ENERGY_STEPS,
                    f" + {N_ENERGY_STEPS_LOG} log" if use_log else "", e_final, null_rate)
        logger.info("Lowest ionisation potential: %.4g eV", min_ion_potential)

        penning_r, penning_lambda = self._penning_parameters(config, species, levels)
        levels = tuple(replace(lvl, penning_r=float(penning_r[i]),
                               penning_lambda=float(penning_lambda[i]))
                       for i, lvl in enumerate(levels))

        deexcitation = config.deexcitation
        channels: Tuple[DeexcitationChannel, ...] = ()
        if deexcitation:
            try:
                channels = build_deexcitation_channels(
                    levels, species, config.fractions, recoil, dens, config.temperature,
                    self.optical)
            except DataInconsistency as err:
                logger.warning("Deexcitation handling is switched off: %s", err)
                deexcitation = False
                channels = ()

        photon = None
        if self.optical is None:
            logger.warning("No optical data provider; photon collision rates unavailable")
        else:
            try:
                photon, channels = PhotonCollisionTable.build(
                    species, config.fractions, recoil, ion_potential, dens, config,
                    self.optical, channels if deexcitation else ())
            except ConfigurationError as err:
                logger.warning("Photon collision rates could not be calculated: %s", err)
        if photon is None and deexcitation:
            logger.warning("Deexcitation handling is switched off")
            deexcitation = False
            channels = ()

        level_channel = np.full(len(levels), -1, dtype=np.int64)
        for k, chan in enumerate(channels):
            if chan.level >= 0:
                level_channel[chan.level] = k

        green_sawada, has_gs = self._green_sawada(species, ion_potential,
                                                  config.splitting == SplittingFunction.GREEN_SAWADA)

        return CompiledTables(
            version=version,
            config=config,
            species=species,
            levels=levels,
            grid=grid,
            recoil=recoil,
            ion_potential=ion_potential,
            min_ion_potential=min_ion_potential,
            null_rate=null_rate,
            penning_r=penning_r,
            penning_lambda=penning_lambda,
            green_sawada=green_sawada,
            has_green_sawada=has_gs,
            channels=tuple(channels),
            level_channel=level_channel,
            photon=photon,
            deexcitation=deexcitation,
            number_density=dens,
        )

    @staticmethod
    def _penning_parameters(config: MixtureConfig, species: Tuple[str, ...],
                            levels: list) -> Tuple[np.ndarray, np.ndarray]:
        """Global Penning parameters, overridden per species where r > SMALL."""
        per_gas = {}
        for name, r, lam in config.penning_species:
            per_gas[name] = (r, lam)
        r_out = np.full(len(levels), config.penning_r)
        lam_out = np.full(len(levels), config.penning_lambda)
        for i, level in enumerate(levels):
            key = config.species[level.gas]
            r, lam = per_gas.get(key, per_gas.get(species[level.gas], (0., 0.)))
            if r > SMALL:
                r_out[i] = r
                lam_out[i] = lam
        return r_out, lam_out

    @staticmethod
    def _green_sawada(species: Tuple[str, ...], ion_potential: np.ndarray,
                      requested: bool) -> Tuple[np.ndarray, np.ndarray]:
        params = np.zeros((len(species), 5))
        available = np.zeros(len(species), dtype=bool)
        for i, name in enumerate(species):
            tb = 2. * ion_potential[i] if np.isfinite(ion_potential[i]) else 0.
            if name in GREEN_SAWADA:
                gs, gb, ts = GREEN_SAWADA[name]
                params[i] = (gs, gb, ts, GREEN_SAWADA_TA, tb)
                available[i] = True
            else:
                params[i, 4] = tb
                if requested:
                    logger.warning("Fit parameters for %s not available; "
                                   "Opal-Beaty formula is used instead", name)
        return params, available
