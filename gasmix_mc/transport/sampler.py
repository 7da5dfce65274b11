"""
Null-collision electron collision sampler.

Given compiled tables, picks the scattering level at the electron's
energy, handles ionisation (secondary electron energy), excitation
(deexcitation cascade or simplified Penning transfer) and updates the
electron's energy and direction with the recoil kinematics.
"""

import logging
import numpy as np

from gasmix_mc.core.constants import SMALL
from gasmix_mc.core.exceptions import InvalidEnergy
from gasmix_mc.core.rng import RandomStream
from gasmix_mc.core.types import (
    CollisionCounters,
    CollisionType,
    ElectronCollision,
    Product,
    ProductType,
    SecondaryType,
    SplittingFunction,
)
from gasmix_mc.physics.kinematics import (
    anisotropic_cosine,
    elastic_recoil,
    flat_energy,
    green_sawada_energy,
    locate_level,
    opal_beaty_energy,
    rotate_direction,
)
from gasmix_mc.transport.deexcitation import DeexcitationEngine
from gasmix_mc.transport.tables import CompiledTables

logger = logging.getLogger(__name__)

# Margin kept between the energy loss and the electron energy [eV]
LOSS_MARGIN = 1.e-4


class CollisionSampler:
    """
    Sample one electron collision at a time.

    All random numbers come from one shared stream in a fixed order:
    level, [secondary energy], [Penning probability, Penning radius] or
    [cascade], polar angle, [model 1 cut and flip], azimuth.
    """

    def __init__(self, tables: CompiledTables, rng: RandomStream,
                 counters: CollisionCounters, engine: DeexcitationEngine):
        self.tables = tables
        self.rng = rng
        self.counters = counters
        self.engine = engine

    def secondary_energy(self, level: int, energy: float, loss: float) -> float:
        """Energy of the electron released in an ionising collision [eV]."""
        tables = self.tables
        lvl = tables.levels[level]
        u = self.rng.uniform()
        splitting = tables.config.splitting
        if splitting == SplittingFunction.GREEN_SAWADA and tables.has_green_sawada[lvl.gas]:
            gs, gb, ts, ta, tb = tables.green_sawada[lvl.gas]
            esec = green_sawada_energy(gs, gb, ts, ta, tb, energy, loss, u)
        elif splitting == SplittingFunction.FLAT:
            esec = flat_energy(energy, loss, u)
        else:
            esec = opal_beaty_energy(lvl.w_opal_beaty, energy, loss, u)
        return esec if esec > 0. else SMALL

    def _penning(self, level: int) -> int:
        """Simplified Penning transfer; returns the number of products."""
        tables = self.tables
        lvl = tables.levels[level]
        excitation = lvl.energy_loss * tables.recoil[lvl.gas]
        if excitation <= tables.min_ion_potential:
            return 0
        if self.rng.uniform() >= tables.penning_r[level]:
            return 0
        esec = max(excitation - tables.min_ion_potential, SMALL)
        s = 0.
        lam = tables.penning_lambda[level]
        if lam > SMALL:
            # Uniform within a sphere of radius lambda
            s = lam * self.rng.uniform_pos()**(1. / 3.)
        self.engine.products.append(Product(0., s, ProductType.ELECTRON, esec))
        self.counters.n_penning += 1
        return 1

    def sample(self, energy: float, direction: np.ndarray) -> ElectronCollision:
        """
        Sample a collision of an electron.

        Energies above the table range are evaluated in the last bin.

        Parameters:
            energy: Kinetic energy [eV]
            direction: Unit direction [dx, dy, dz]

        Returns:
            ElectronCollision with the post-collision energy and direction

        Raises:
            InvalidEnergy: energy <= 0
        """
        if energy <= 0.:
            raise InvalidEnergy(f"Electron energy must be greater than zero, got {energy}")
        tables = self.tables
        on_log, i_e = tables.grid.locate(energy)
        cumulative, cuts, pars = tables.grid.bin_arrays(on_log, i_e)

        level = locate_level(cumulative, self.rng.uniform())
        cut = cuts[level]
        par = pars[level]
        lvl = tables.levels[level]
        category = lvl.category
        self.counters.add_electron(category, level)

        self.engine.clear()
        loss = lvl.energy_loss
        secondaries = ()
        n_dxc = 0
        if category == CollisionType.IONISATION:
            esec = self.secondary_energy(level, energy, loss)
            loss += esec
            secondaries = ((SecondaryType.ELECTRON, esec), (SecondaryType.ION, 0.))
        elif category == CollisionType.EXCITATION:
            channel = tables.level_channel[level]
            if tables.deexcitation and channel >= 0:
                self.engine.run(int(channel))
                n_dxc = len(self.engine.products)
            elif tables.config.penning:
                n_dxc = self._penning(level)

        if energy < loss:
            loss = energy - LOSS_MARGIN

        ctheta0 = 1. - 2. * self.rng.uniform()
        if tables.config.anisotropic:
            if lvl.model == 1:
                u1 = self.rng.uniform()
                u2 = self.rng.uniform()
                ctheta0 = anisotropic_cosine(1, ctheta0, cut, par, u1, u2)
            elif lvl.model == 2:
                ctheta0 = anisotropic_cosine(2, ctheta0, cut, par, 0., 0.)
            elif lvl.model != 0:
                logger.warning("Unknown scattering model %d; using isotropic distribution",
                               lvl.model)

        e1, ctheta, stheta = elastic_recoil(energy, loss, ctheta0, tables.recoil[lvl.gas])
        phi = 2. * np.pi * self.rng.uniform()
        new_direction = rotate_direction(np.asarray(direction, dtype=np.float64),
                                         ctheta, stheta, phi)
        return ElectronCollision(category, int(level), float(e1), new_direction,
                                 secondaries, n_dxc)
