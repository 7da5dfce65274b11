"""
Photon absorption rates in a gas mixture.

The continuum part is tabulated on a linear grid from the species'
photoabsorption cross sections, split into an ionising and a
non-ionising term per species with the photoionisation yield. Discrete
resonance lines of the deexcitation channels add Voigt-shaped
contributions around their line energies when radiation trapping is
enabled.
"""

import logging
import numpy as np
from dataclasses import dataclass, replace
from typing import Sequence, Tuple

from gasmix_mc.core.config import MixtureConfig
from gasmix_mc.core.constants import F2CS, N_ENERGY_STEPS_GAMMA, SMALL, SPEED_OF_LIGHT
from gasmix_mc.core.exceptions import ConfigurationError
from gasmix_mc.core.rng import RandomStream
from gasmix_mc.core.types import CollisionCounters, PhotonCollision, PhotonCollisionType
from gasmix_mc.physics.line_shape import doppler_sigma, line_profile, line_window, pressure_gamma
from gasmix_mc.physics.providers import OpticalDataProvider
from gasmix_mc.physics.spectroscopy import OPTICAL_NAME_SUBSTITUTES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotonCollisionTable:
    """
    Continuum absorption table plus resonance lines.

    Attributes:
        e_final: Upper end of the table [eV]
        e_step: Bin width [eV]
        total: Continuum absorption rate per bin [ns^-1]
        cumulative: Cumulative absolute rates over terms, (n_bins, n_terms)
        term_gas: Species index of each term
        term_type: IONISATION or INELASTIC per term
        ion_potential: Ionisation potential per species [eV]
        line_channel: Deexcitation channel index of each line
        line_energy, line_cf, line_sigma, line_gamma, line_width: Line data
        use_lines: Lines contribute to rates and sampling
    """
    e_final: float
    e_step: float
    total: np.ndarray
    cumulative: np.ndarray
    term_gas: np.ndarray
    term_type: Tuple[PhotonCollisionType, ...]
    ion_potential: np.ndarray
    line_channel: np.ndarray
    line_energy: np.ndarray
    line_cf: np.ndarray
    line_sigma: np.ndarray
    line_gamma: np.ndarray
    line_width: np.ndarray
    use_lines: bool = False

    @property
    def n_terms(self) -> int:
        return len(self.term_type)

    @property
    def n_lines(self) -> int:
        return len(self.line_channel)

    @classmethod
    def build(cls, species: Sequence[str], fractions: Sequence[float], recoil: np.ndarray,
              ion_potential: np.ndarray, density: float, config: MixtureConfig,
              optical: OpticalDataProvider, channels: Sequence = ()
              ) -> Tuple['PhotonCollisionTable', tuple]:
        """
        Compile the table and attach line shapes to the channels.

        Returns:
            (table, channels with Doppler/pressure widths and cf filled in)

        Raises:
            ConfigurationError: No optical data for one of the species
        """
        e_final = config.max_photon_energy
        e_step = e_final / N_ENERGY_STEPS_GAMMA
        energies = (np.arange(N_ENERGY_STEPS_GAMMA) + 0.5) * e_step

        terms = []
        term_gas = []
        term_type = []
        for i, name in enumerate(species):
            optical_name = OPTICAL_NAME_SUBSTITUTES.get(name, name)
            if optical_name != name:
                logger.info("Photoabsorption cross-section for %s not available; "
                            "using %s instead", name, optical_name)
            if not optical.is_available(optical_name):
                raise ConfigurationError(f"No photoabsorption data for {name}")
            prefactor = density * SPEED_OF_LIGHT * fractions[i]
            cs, eta = optical.photoabsorption(optical_name, energies)
            cs = np.asarray(cs, dtype=np.float64)
            eta = np.asarray(eta, dtype=np.float64)
            terms.append(cs * prefactor * eta)
            terms.append(cs * prefactor * (1. - eta))
            term_gas.extend((i, i))
            term_type.extend((PhotonCollisionType.IONISATION, PhotonCollisionType.INELASTIC))

        rates = np.vstack(terms).T
        cumulative = np.cumsum(rates, axis=1)
        total = cumulative[:, -1].copy()

        channels = list(channels)
        lines = []
        for k, chan in enumerate(channels):
            if chan.osc < SMALL:
                continue
            fraction = fractions[chan.gas]
            cf = density * SPEED_OF_LIGHT * fraction * F2CS * chan.osc
            sigma = doppler_sigma(chan.energy, config.temperature, recoil[chan.gas])
            gamma = pressure_gamma(chan.energy, chan.osc, density * fraction)
            channels[k] = replace(chan, cf=cf, doppler_sigma=sigma, pressure_gamma=gamma,
                                  width=line_window(sigma, gamma))
            lines.append(k)
        if channels and not lines:
            logger.warning("No resonance lines found")
        elif lines:
            logger.info("%d discrete absorption lines", len(lines))

        line_channel = np.asarray(lines, dtype=np.int64)
        table = cls(
            e_final=e_final,
            e_step=e_step,
            total=total,
            cumulative=cumulative,
            term_gas=np.asarray(term_gas, dtype=np.int64),
            term_type=tuple(term_type),
            ion_potential=np.asarray(ion_potential, dtype=np.float64),
            line_channel=line_channel,
            line_energy=np.array([channels[k].energy for k in lines]),
            line_cf=np.array([channels[k].cf for k in lines]),
            line_sigma=np.array([channels[k].doppler_sigma for k in lines]),
            line_gamma=np.array([channels[k].pressure_gamma for k in lines]),
            line_width=np.array([channels[k].width for k in lines]),
            use_lines=bool(config.deexcitation and config.radiation_trapping and lines),
        )
        return table, tuple(channels)

    def locate(self, energy: float) -> int:
        return min(max(int(energy / self.e_step), 0), N_ENERGY_STEPS_GAMMA - 1)

    def _line_contributions(self, energy: float) -> Tuple[np.ndarray, np.ndarray]:
        """Indices and absorption rates of the lines whose window contains energy."""
        if not self.use_lines:
            return np.zeros(0, dtype=np.int64), np.zeros(0)
        delta = energy - self.line_energy
        active = np.nonzero((self.line_cf > 0.) & (np.abs(delta) <= self.line_width))[0]
        contrib = np.array([self.line_cf[i] * line_profile(delta[i], self.line_sigma[i],
                                                           self.line_gamma[i])
                            for i in active])
        return active, contrib

    def rate(self, energy: float) -> float:
        """Total absorption rate [ns^-1]."""
        if energy <= 0.:
            logger.warning("Photon energy must be greater than zero")
            return float(self.total[0])
        _, contrib = self._line_contributions(energy)
        return float(self.total[self.locate(energy)] + contrib.sum())

    def sample(self, energy: float, rng: RandomStream, counters: CollisionCounters,
               engine=None) -> PhotonCollision:
        """
        Sample the absorption process.

        A photon inside a line window may be absorbed by the line; the
        cascade of the corresponding channel is then run on the engine and
        the products are left in its product list.
        """
        i_e = self.locate(energy)
        continuum = self.total[i_e]
        r = continuum
        active, contrib = self._line_contributions(energy)
        p_line = continuum + np.cumsum(contrib)
        if len(active):
            r = p_line[-1]
        r *= rng.uniform()

        if len(active) and r >= continuum:
            k = int(np.searchsorted(p_line, r))
            k = min(k, len(active) - 1)
            channel = int(self.line_channel[active[k]])
            counters.add_photon(PhotonCollisionType.EXCITATION)
            n_sec = 0
            if engine is not None:
                engine.run(channel)
                n_sec = len(engine.products)
            return PhotonCollision(PhotonCollisionType.EXCITATION, channel, 0., 1., n_sec, 0.)

        cum = self.cumulative[i_e]
        if r <= cum[0]:
            term = 0
        elif r >= cum[-1]:
            term = self.n_terms - 1
        else:
            term = int(np.searchsorted(cum, r))
        category = self.term_type[term]
        counters.add_photon(category)
        n_sec = 0
        esec = 0.
        if category == PhotonCollisionType.IONISATION:
            esec = max(energy - self.ion_potential[self.term_gas[term]], SMALL)
            n_sec = 1
        ctheta = 2. * rng.uniform() - 1.
        return PhotonCollision(category, term, 0., ctheta, n_sec, esec)
