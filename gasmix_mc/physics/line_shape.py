"""
Spectral line shapes of resonance lines.

Doppler broadening (Gaussian) convolved with resonance (pressure)
broadening (Lorentzian). Profile values come from scipy.special.

References:
    - Ali and Griem, Phys. Rev. 140, 1044 (1965); 144, 366 (1966)
    - Olivero and Longbothum, J. Quant. Spectr. Rad. Trans. 17, 233 (1977)
"""

import numpy as np
from scipy.special import voigt_profile
from typing import Union

from gasmix_mc.core.constants import (
    BOLTZMANN_CONSTANT,
    ELECTRON_MASS,
    FINE_STRUCTURE_CONSTANT,
    HBAR_C,
)

# Resonance broadening coefficient
K_RES_BROAD = 1.92 * np.pi * np.sqrt(1. / 3.)

# Absorption window in units of the Voigt FWHM
N_WIDTHS = 1000.


def doppler_sigma(energy: float, temperature: float, recoil: float) -> float:
    """
    Standard deviation of the Doppler profile [eV].

    Parameters:
        energy: Line energy [eV]
        temperature: Gas temperature [K]
        recoil: Recoil factor of the species, 1 + m_e / M
    """
    mgas = ELECTRON_MASS / (recoil - 1.)
    return np.sqrt(BOLTZMANN_CONSTANT * temperature / mgas) * energy


def pressure_gamma(energy: float, osc: float, density: float) -> float:
    """
    Half width at half maximum from resonance broadening [eV].

    Parameters:
        energy: Line energy [eV]
        osc: Oscillator strength
        density: Number density of the absorbing species [cm^-3]
    """
    return (K_RES_BROAD * FINE_STRUCTURE_CONSTANT * HBAR_C**3 * osc * density /
            (ELECTRON_MASS * energy))


def voigt_fwhm(sigma: float, gamma: float) -> float:
    """Olivero-Longbothum approximation of the Voigt FWHM."""
    fwhm_gauss = sigma * np.sqrt(2. * np.log(2.))
    fwhm_lorentz = gamma
    return 0.5 * (1.0692 * fwhm_lorentz +
                  np.sqrt(0.86639 * fwhm_lorentz**2 + 4. * fwhm_gauss**2))


def line_window(sigma: float, gamma: float) -> float:
    """Half width of the energy window within which the line can absorb [eV]."""
    return N_WIDTHS * voigt_fwhm(sigma, gamma)


def line_profile(delta: Union[float, np.ndarray], sigma: float,
                 gamma: float) -> Union[float, np.ndarray]:
    """
    Normalised Voigt profile [eV^-1].

    Parameters:
        delta: Offset from the line centre [eV]
        sigma: Gaussian standard deviation [eV]
        gamma: Lorentzian half width at half maximum [eV]
    """
    return voigt_profile(delta, sigma, gamma)
