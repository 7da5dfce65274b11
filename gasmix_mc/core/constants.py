"""
Physical constants and fixed table parameters.

All quantities use the transport unit system: energies in eV, lengths in
cm, times in ns. Values are taken from scipy.constants (CODATA) and
converted once at import time.
"""

import numpy as np
from scipy import constants as _sc
from scipy.constants import physical_constants as _pc

# Speed of light [cm/ns]
SPEED_OF_LIGHT = _sc.c * 1.e-7

# Electron rest energy [eV]
ELECTRON_MASS = _pc['electron mass energy equivalent in MeV'][0] * 1.e6

# Electron mass [g]
ELECTRON_MASS_GRAMME = _sc.m_e * 1.e3

# Atomic mass unit [g] and its rest energy [eV]
ATOMIC_MASS_UNIT = _pc['atomic mass constant'][0] * 1.e3
ATOMIC_MASS_UNIT_EV = _pc['atomic mass constant energy equivalent in MeV'][0] * 1.e6

FINE_STRUCTURE_CONSTANT = _sc.fine_structure

# hbar * c [eV cm]
HBAR_C = _pc['reduced Planck constant times c in MeV fm'][0] * 1.e6 * 1.e-13

# Boltzmann constant [eV/K]
BOLTZMANN_CONSTANT = _pc['Boltzmann constant in eV/K'][0]

# Rydberg energy [eV]
RYDBERG_ENERGY = _pc['Rydberg constant times hc in eV'][0]

# Bohr radius [cm]
BOHR_RADIUS = _pc['Bohr radius'][0] * 1.e2

# Loschmidt number density at 273.15 K and 101.325 kPa [cm^-3]
LOSCHMIDT_NUMBER = _pc['Loschmidt constant (273.15 K, 101.325 kPa)'][0] * 1.e-6

ZERO_CELSIUS = _sc.zero_Celsius
ATM_TORR = 760.

# Floor applied to sampled energies and probabilities
SMALL = 1.e-20

# Energy grids
N_ENERGY_STEPS = 20000
N_ENERGY_STEPS_LOG = 200
N_ENERGY_STEPS_GAMMA = 5000
ENERGY_HIGH = 1.e4
ENERGY_HIGH_LOG = np.log(ENERGY_HIGH)

# Maximum number of scattering levels in a mixture
N_MAX_LEVELS = 512

# Kinetic energy above which the rate is corrected relativistically [eV]
RELATIVISTIC_THRESHOLD = 1.e3

# Oscillator strength -> radiative transition rate [ns^-1 eV^-2]
F2A = 2. * SPEED_OF_LIGHT * FINE_STRUCTURE_CONSTANT / (3. * ELECTRON_MASS * HBAR_C)

# Oscillator strength -> integrated photoabsorption cross section [cm^2 eV]
F2CS = FINE_STRUCTURE_CONSTANT * 2. * np.pi**2 * HBAR_C**2 / ELECTRON_MASS


def number_density(temperature: float, pressure: float) -> float:
    """
    Ideal gas number density.

    Parameters:
        temperature: Gas temperature [K]
        pressure: Gas pressure [Torr]

    Returns:
        Number density [cm^-3]
    """
    return LOSCHMIDT_NUMBER * (pressure / ATM_TORR) * (ZERO_CELSIUS / temperature)
