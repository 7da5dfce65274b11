"""
Relaxation cascades of excited gas states.

build_deexcitation_channels() assembles one DeexcitationChannel per
excited argon level of the mixture (plus the synthetic dimer and excimer
states) from the static tables in physics.spectroscopy: radiative decays,
argon self-collisions and quenching by molecular admixtures. The
DeexcitationEngine then follows a cascade from a starting channel,
recording emitted photons and Penning electrons with their emission
times.

References:
    - Biagi, Magboltz (level descriptions)
    - Watanabe and Katsuura, J. Chem. Phys. 47, 800 (1967)
    - Sakai et al., J. Phys. D 24, 283 (1991) (excimer formation)
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from gasmix_mc.core.constants import F2A, SMALL
from gasmix_mc.core.exceptions import DataInconsistency
from gasmix_mc.core.rng import RandomStream
from gasmix_mc.core.types import (
    CollisionCounters,
    CollisionType,
    DxcType,
    Level,
    Product,
    ProductType,
)
from gasmix_mc.physics.providers import OpticalDataProvider
from gasmix_mc.physics import spectroscopy as spectro

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeexcitationChannel:
    """
    Decay data of one excited state.

    Attributes:
        label: Spectroscopic label, e.g. "Ar_1S4"
        gas: Index of the species in the mixture
        level: Associated scattering level, -1 for synthetic states
        energy: Excitation energy [eV]
        osc: Oscillator strength of the transition to the ground state
        rate: Total decay rate [ns^-1]
        probabilities: Cumulative branch probabilities
        targets: Channel index reached by each branch, -1 for none
        types: Branch types
        doppler_sigma: Doppler standard deviation of the resonance line [eV]
        pressure_gamma: Pressure-broadening HWHM [eV]
        width: Window within which the line absorbs [eV]
        cf: Integrated absorption rate [ns^-1 eV]
    """
    label: str
    gas: int
    level: int
    energy: float
    osc: float = 0.
    rate: float = 0.
    probabilities: Tuple[float, ...] = ()
    targets: Tuple[int, ...] = ()
    types: Tuple[DxcType, ...] = ()
    doppler_sigma: float = 0.
    pressure_gamma: float = 0.
    width: float = 0.
    cf: float = 0.

    @property
    def n_branches(self) -> int:
        return len(self.probabilities)

    @property
    def is_dead_end(self) -> bool:
        return self.rate <= 0. or not self.probabilities


@dataclass
class _Draft:
    """Mutable channel under construction; targets are labels or None."""
    label: str
    gas: int
    level: int
    energy: float
    osc: float = 0.
    rates: List[float] = field(default_factory=list)
    targets: List[Optional[str]] = field(default_factory=list)
    types: List[DxcType] = field(default_factory=list)

    def add(self, rate: float, target: Optional[str], dxc_type: DxcType):
        self.rates.append(rate)
        self.targets.append(target)
        self.types.append(dxc_type)

    def add_penning(self, rate: float, p_penning: float):
        """Split a quenching rate into ionising and non-ionising parts."""
        self.add(rate * p_penning, None, DxcType.COLLISIONAL_IONISING)
        self.add(rate * (1. - p_penning), None, DxcType.COLLISIONAL_NON_IONISING)


def _argon_label(description: str) -> Optional[str]:
    key = description[5:12].ljust(7)
    return spectro.ARGON_LEVEL_NAMES.get(key)


def _add_radiative(draft: _Draft):
    if draft.label == "Ar_Higher":
        for target in spectro.ARGON_HIGHER_TARGETS:
            draft.add(spectro.ARGON_HIGHER_RATE, target, DxcType.COLLISIONAL_NON_IONISING)
        return
    data = spectro.ARGON_RADIATIVE.get(draft.label)
    if data is None:
        return
    draft.osc = data.osc
    for rate, target in data.branches:
        if rate is spectro.FROM_OSC:
            rate = F2A * draft.energy**2 * data.osc
        draft.add(rate, target, DxcType.RADIATIVE)


def _add_self_collisions(draft: _Draft, n_ar: float):
    label = draft.label
    nonion = DxcType.COLLISIONAL_NON_IONISING
    if label in spectro.ARGON_METASTABLE_COLLISIONS:
        k3b, k2b = spectro.ARGON_METASTABLE_COLLISIONS[label]
        draft.add(k3b * n_ar * n_ar, spectro.ARGON_EXCIMER, nonion)
        draft.add(k2b * n_ar, "Ar_1S4", nonion)
    for target, k in spectro.ARGON_4P_MIXING.get(label, ()):
        draft.add(k * n_ar, target, nonion)
    if label in spectro.ARGON_4P_TO_4S:
        k4s = spectro.ARGON_4P_TO_4S[label]
        for target in spectro.ARGON_4S_LEVELS:
            draft.add(0.25 * k4s * n_ar, target, nonion)
    if label in spectro.ARGON_3D5S_LEVELS or label in spectro.ARGON_HIGH_LEVELS:
        for target in spectro.ARGON_4P_LEVELS:
            draft.add(0.1 * spectro.K_4P_TRANSFER * n_ar, target, nonion)
    if label in spectro.ARGON_HIGH_LEVELS:
        # Hornbeck-Molnar associative ionisation
        draft.add(spectro.K_HORNBECK_MOLNAR * n_ar, spectro.ARGON_DIMER, DxcType.COLLISIONAL_IONISING)


def _photoabsorption(optical: Optional[OpticalDataProvider], name: str,
                     energy: float) -> Tuple[float, float]:
    if optical is None or not optical.is_available(name):
        return 0., 0.
    pacs, eta = optical.photoabsorption(name, energy)
    return float(pacs), float(eta)


def _add_quenching(draft: _Draft, quencher: spectro.QuencherData, n_q: float,
                   r_ar: float, r_q: float, temperature: float,
                   optical: Optional[OpticalDataProvider]):
    pacs, eta = _photoabsorption(optical, quencher.optical_name, draft.energy)
    p_wk = eta**0.4

    def outcome(rate, mode):
        if mode == spectro.LOSS:
            draft.add(rate, None, DxcType.COLLISIONAL_NON_IONISING)
        elif mode == spectro.PENNING_WK:
            draft.add_penning(rate, p_wk)
        else:
            draft.add_penning(rate, float(mode))

    label = draft.label
    if label in quencher.rates:
        k, mode = quencher.rates[label]
        outcome(k * n_q, mode)
    elif draft.osc > 0.:
        k = spectro.rate_constant_wk(draft.energy, draft.osc, pacs, r_ar, r_q, temperature)
        outcome(k * n_q, quencher.fallback)
    elif label in spectro.ARGON_3D_NONRESONANT:
        k = spectro.rate_constant_hard_sphere(spectro.R_AR_3D, quencher.radius, r_ar, r_q, temperature)
        outcome(k * n_q, quencher.fallback)
    elif label in spectro.ARGON_5S_NONRESONANT:
        k = spectro.rate_constant_hard_sphere(spectro.R_AR_5S, quencher.radius, r_ar, r_q, temperature)
        outcome(k * n_q, quencher.fallback)


def _finalise(draft: _Draft, index: Dict[str, int]) -> DeexcitationChannel:
    if not len(draft.rates) == len(draft.targets) == len(draft.types):
        raise DataInconsistency(f"Mismatch in branch count of {draft.label}")
    rates, targets, types = [], [], []
    for rate, target, dxc_type in zip(draft.rates, draft.targets, draft.types):
        if target is not None and target not in index:
            logger.warning("%s: dropping branch to %s (state not in mixture)",
                           draft.label, target)
            continue
        rates.append(rate)
        targets.append(-1 if target is None else index[target])
        types.append(dxc_type)
    rate = float(np.sum(rates)) if rates else 0.
    probabilities: Tuple[float, ...] = ()
    if rate > 0.:
        probabilities = tuple(float(p) for p in np.cumsum(rates) / rate)
    return DeexcitationChannel(
        label=draft.label, gas=draft.gas, level=draft.level, energy=draft.energy,
        osc=draft.osc, rate=rate, probabilities=probabilities,
        targets=tuple(targets), types=tuple(types))


def build_deexcitation_channels(levels: Sequence[Level], species: Sequence[str],
                                fractions: Sequence[float], recoil: np.ndarray,
                                density: float, temperature: float,
                                optical: Optional[OpticalDataProvider] = None
                                ) -> Tuple[DeexcitationChannel, ...]:
    """
    Deexcitation channels of a mixture.

    Channels are ordered by label, followed by Ar_Dimer and Ar_Excimer.
    A label seen twice keeps its last level. Mixtures without argon have
    no channels.

    Parameters:
        levels: Scattering levels of the mixture
        species: Canonical species names
        fractions: Mole fractions
        recoil: Recoil factor per species
        density: Gas number density [cm^-3]
        temperature: Gas temperature [K]
        optical: Photoabsorption data for Penning probabilities and
            Watanabe-Katsuura rates

    Raises:
        DataInconsistency: Branch arrays of unequal length
    """
    by_label: Dict[str, _Draft] = {}
    i_ar = -1
    for i, level in enumerate(levels):
        if level.category != CollisionType.EXCITATION or species[level.gas] != "Ar":
            continue
        if i_ar < 0:
            i_ar = level.gas
        label = _argon_label(level.description)
        if label is None:
            logger.warning("Unknown Ar excitation level: %r", level.description)
            continue
        by_label[label] = _Draft(label, level.gas, i, level.energy_loss * recoil[level.gas])

    if i_ar < 0:
        return ()

    drafts: List[_Draft] = [by_label[label] for label in sorted(by_label)]

    for draft in drafts:
        _add_radiative(draft)
    logger.info("Found %d levels with radiative deexcitation data", len(drafts))

    drafts.append(_Draft(spectro.ARGON_DIMER, i_ar, -1, spectro.ARGON_DIMER_ENERGY))
    drafts.append(_Draft(spectro.ARGON_EXCIMER, i_ar, -1, spectro.ARGON_DIMER_ENERGY))

    n_ar = density * fractions[i_ar]
    for draft in drafts:
        _add_self_collisions(draft, n_ar)

    for name, quencher in spectro.QUENCHERS.items():
        if name not in species:
            continue
        i_q = list(species).index(name)
        n_q = density * fractions[i_q]
        for draft in drafts:
            _add_quenching(draft, quencher, n_q, recoil[i_ar], recoil[i_q], temperature, optical)

    index = {draft.label: k for k, draft in enumerate(drafts)}
    channels = tuple(_finalise(draft, index) for draft in drafts)
    logger.info("Deexcitation table: %d channels", len(channels))
    return channels


class DeexcitationEngine:
    """
    Monte Carlo relaxation cascade.

    The engine owns the product list of the most recent cascade; it is
    cleared at the start of every run.

    Usage:
        engine = DeexcitationEngine(tables.channels, tables.min_ion_potential,
                                    rng, counters)
        final = engine.run(channel_index)
        for product in engine.products: ...
    """

    def __init__(self, channels: Sequence[DeexcitationChannel], min_ion_potential: float,
                 rng: RandomStream, counters: CollisionCounters):
        self.channels = tuple(channels)
        self.min_ion_potential = min_ion_potential
        self.rng = rng
        self.counters = counters
        self.products: List[Product] = []

    def clear(self):
        self.products = []

    def _ground_state_photon(self, chan: DeexcitationChannel) -> float:
        energy = chan.energy
        if chan.width <= 0.:
            return energy
        delta = self.rng.voigt(0., chan.doppler_sigma, chan.pressure_gamma)
        while energy + delta < SMALL or abs(delta) >= chan.width:
            delta = self.rng.voigt(0., chan.doppler_sigma, chan.pressure_gamma)
        return energy + delta

    def run(self, start: int) -> int:
        """
        Follow the cascade from a channel.

        Parameters:
            start: Channel index

        Returns:
            Index of the channel where the cascade ended, -1 if the
            excitation was lost in a non-ionising collision
        """
        self.products = []
        t = 0.
        current = start
        final = start
        n = len(self.channels)
        while 0 <= current < n:
            chan = self.channels[current]
            if chan.is_dead_end:
                return current
            t += -np.log(self.rng.uniform_pos()) / chan.rate

            final = -1
            dxc_type = DxcType.RADIATIVE
            r = self.rng.uniform()
            for j, p in enumerate(chan.probabilities):
                if r <= p:
                    final = chan.targets[j]
                    dxc_type = chan.types[j]
                    break

            if dxc_type == DxcType.RADIATIVE:
                if final >= 0:
                    energy = max(chan.energy - self.channels[final].energy, SMALL)
                    self.products.append(Product(t, 0., ProductType.PHOTON, energy))
                    current = final
                else:
                    energy = self._ground_state_photon(chan)
                    self.products.append(Product(t, 0., ProductType.PHOTON, energy))
                    return current
            elif dxc_type == DxcType.COLLISIONAL_IONISING:
                self.counters.n_penning += 1
                if final >= 0:
                    energy = max(chan.energy - self.channels[final].energy, SMALL)
                    self.products.append(Product(t, 0., ProductType.ELECTRON, energy))
                    current = final
                else:
                    energy = max(chan.energy - self.min_ion_potential, SMALL)
                    self.products.append(Product(t, 0., ProductType.ELECTRON, energy))
                    return current
            else:
                current = final
        return final
