"""
Collision kinematics kernels.

Secondary electron energy distributions for ionising collisions, angular
distribution remapping, the light-projectile / heavy-target elastic
recoil update and the direction rotation. All kernels are numba-compiled
and take their uniform random numbers as arguments, so the caller owns
the draw order.

References:
    - Opal, Peterson and Beaty, J. Chem. Phys. 55, 4100 (1971)
    - Green and Sawada, J. Atm. Terr. Phys. 34, 1719 (1972)
    - Biagi, Magboltz (angular models 1 and 2)
"""

import numpy as np
import numba
from typing import Tuple

from gasmix_mc.core.constants import SMALL


@numba.njit(fastmath=True, cache=True)
def opal_beaty_energy(w: float, energy: float, loss: float, u: float) -> float:
    """
    Secondary electron energy from the Opal-Beaty-Peterson parameterisation.

        T = w * tan(u * atan(0.5 * (E - loss) / w))

    Parameters:
        w: Splitting parameter [eV]
        energy: Primary electron energy [eV]
        loss: Ionisation threshold (recoil corrected) [eV]
        u: Uniform random number in [0, 1)

    Returns:
        Secondary energy [eV], in [0, 0.5 * (E - loss)]
    """
    return w * np.tan(u * np.arctan(0.5 * (energy - loss) / w))


@numba.njit(fastmath=True, cache=True)
def green_sawada_energy(gs: float, gb: float, ts: float, ta: float, tb: float,
                        energy: float, loss: float, u: float) -> float:
    """
    Secondary electron energy from the Green-Sawada parameterisation.

    Parameters:
        gs, gb: Width parameters, w = gs * E / (E + gb) [eV]
        ts, ta, tb: Offset parameters, T0 = ts - ta / (E + tb) [eV]
        energy: Primary electron energy [eV]
        loss: Ionisation threshold (recoil corrected) [eV]
        u: Uniform random number in [0, 1)

    Returns:
        Secondary energy [eV]
    """
    w = gs * energy / (energy + gb)
    esec0 = ts - ta / (energy + tb)
    return esec0 + w * np.tan((u - 1.) * np.arctan(esec0 / w) +
                              u * np.arctan((0.5 * (energy - loss) - esec0) / w))


@numba.njit(fastmath=True, cache=True)
def flat_energy(energy: float, loss: float, u: float) -> float:
    """Secondary energy uniformly distributed over the available energy."""
    return u * (energy - loss)


@numba.njit(cache=True)
def scattering_parameters(model: int, par_in: float) -> Tuple[float, float]:
    """
    Angular cut and parameter for one level and energy bin.

    Model 0 (or below) is isotropic. Model 2 uses the provider parameter
    directly. Model 1 uses it directly when it is at most 1; otherwise a
    cut on the polar angle is introduced and the forward scattering
    probability renormalised.

    Returns:
        (cut, par)
    """
    cut = 1.
    par = 0.5
    if model <= 0:
        return cut, par
    if model >= 2:
        return cut, par_in
    if par_in <= 1.:
        return cut, par_in

    cns = par_in - 0.5
    thetac = np.arcsin(2. * np.sqrt(cns - cns * cns))
    fac = (1. - np.cos(thetac)) / np.sin(thetac)**2
    par = cns * fac + 0.5
    cut = thetac * 2. / np.pi
    return cut, par


@numba.njit(cache=True)
def scattering_parameters_array(model: int, par_in: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorised scattering_parameters over the bins of one level."""
    n = len(par_in)
    cut = np.empty(n)
    par = np.empty(n)
    for i in range(n):
        c, p = scattering_parameters(model, par_in[i])
        cut[i] = c
        par[i] = p
    return cut, par


@numba.njit(fastmath=True, cache=True)
def anisotropic_cosine(model: int, ctheta0: float, cut: float, par: float,
                       u1: float, u2: float) -> float:
    """
    Remap an isotropic pre-collision cosine according to the level's model.

    Model 1 draws a fresh cosine from the cut interval (u1) and flips it
    backward with probability 1 - par (u2). Model 2 applies the
    one-parameter forward-peaked map. Other models leave it unchanged.
    """
    if model == 1:
        c = 1. - u1 * cut
        if u2 > par:
            c = -c
        return c
    if model == 2:
        return (ctheta0 + par) / (1. + par * ctheta0)
    return ctheta0


@numba.njit(fastmath=True, cache=True)
def elastic_recoil(energy: float, loss: float, ctheta0: float,
                   s1: float) -> Tuple[float, float, float]:
    """
    Binary collision of a light projectile with a heavy target.

    Parameters:
        energy: Energy before the collision [eV]
        loss: Energy loss (threshold plus any secondary energy) [eV]
        ctheta0: Cosine of the scattering angle in the centre-of-mass frame
        s1: Recoil factor of the target species, 1 + m_e / M

    Returns:
        (energy after collision [eV], cos(theta), sin(theta)) in the lab frame
    """
    s2 = (s1 * s1) / (s1 - 1.)
    theta0 = np.arccos(ctheta0)
    arg = max(1. - s1 * loss / energy, SMALL)
    d = 1. - ctheta0 * np.sqrt(arg)

    e1 = max(energy * (1. - loss / (s1 * energy) - 2. * d / s2), SMALL)
    q = min(np.sqrt((energy / e1) * arg) / s1, 1.)
    theta = np.arcsin(q * np.sin(theta0))
    ctheta = np.cos(theta)
    if ctheta0 < 0.:
        u = (s1 - 1.) * (s1 - 1.) / arg
        if ctheta0 * ctheta0 > u:
            ctheta = -ctheta
    return e1, ctheta, np.sin(theta)


@numba.njit(fastmath=True, cache=True)
def rotate_direction(direction: np.ndarray, ctheta: float, stheta: float,
                     phi: float) -> np.ndarray:
    """
    Rotate a unit direction by polar angle theta and azimuth phi.

    The azimuth is measured around the incoming direction. For a
    direction along the z axis the new direction is built directly from
    the angles.

    Parameters:
        direction: Unit vector [dx, dy, dz]
        ctheta, stheta: Cosine and sine of the polar angle
        phi: Azimuthal angle [radians]

    Returns:
        New unit vector [dx, dy, dz]
    """
    dx = direction[0]
    dy = direction[1]
    dz = min(direction[2], 1.)
    arg_z = np.sqrt(dx * dx + dy * dy)

    cphi = np.cos(phi)
    sphi = np.sin(phi)

    result = np.empty(3, dtype=np.float64)
    if arg_z == 0.:
        result[0] = cphi * stheta
        result[1] = sphi * stheta
        result[2] = ctheta
    else:
        a = stheta / arg_z
        result[2] = dz * ctheta + arg_z * stheta * sphi
        result[1] = dy * ctheta + a * (dx * cphi - dy * dz * sphi)
        result[0] = dx * ctheta - a * (dy * cphi + dx * dz * sphi)
    return result


@numba.njit(cache=True)
def locate_level(cumulative: np.ndarray, u: float) -> int:
    """
    First index whose cumulative probability is >= u.

    Binary search over the bin's cumulative vector, clamped to the last
    level.
    """
    n = len(cumulative)
    if u <= cumulative[0]:
        return 0
    if u >= cumulative[n - 1]:
        return n - 1
    return int(np.searchsorted(cumulative, u))
