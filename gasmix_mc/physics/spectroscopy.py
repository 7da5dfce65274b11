"""
Spectroscopic data for excited-state relaxation.

Static lookup tables keyed by level label: radiative branches of the
argon 4s, 4p, 3d, 5s and higher levels, argon self-collision rate
constants (excimer formation, collisional mixing, 4p/4s transfer,
Hornbeck-Molnar ionisation) and quenching rate constants of argon
excited states by molecular admixtures. Rate constants are in cm^3/ns
(two-body) or cm^6/ns (three-body); radiative rates in ns^-1.

References:
    - NIST Atomic Spectra Database (radiative transition rates)
    - Zatsarinny and Bartschat, J. Phys. B 39, 2145 (2006)
    - Berkowitz, Atomic and Molecular Photoabsorption (2002)
    - Lee and Lu, Phys. Rev. A 8, 1241 (1973)
    - Kolts and Setser, J. Chem. Phys. 68, 4848 (1978)
    - Nguyen and Sadeghi, Phys. Rev. A 18, 1388 (1978)
    - Chang and Setser, J. Chem. Phys. 69, 3885 (1978)
    - Sadeghi et al., J. Chem. Phys. 115, 3144 (2001)
    - Velazco et al., J. Chem. Phys. 69, 4357 (1978)
    - Chen and Setser, J. Phys. Chem. 95, 8473 (1991)
    - Becker and Lampe, J. Chem. Phys. 42, 3857 (1965)
    - Watanabe and Katsuura, J. Chem. Phys. 47, 800 (1967)
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from gasmix_mc.core.constants import (
    ATOMIC_MASS_UNIT,
    BOHR_RADIUS,
    BOLTZMANN_CONSTANT,
    ELECTRON_MASS,
    ELECTRON_MASS_GRAMME,
    FINE_STRUCTURE_CONSTANT,
    RYDBERG_ENERGY,
    SPEED_OF_LIGHT,
)

# Magboltz level names (characters 5-11 of the description) -> labels
ARGON_LEVEL_NAMES = {
    "1S5    ": "Ar_1S5", "1S4    ": "Ar_1S4", "1S3    ": "Ar_1S3",
    "1S2    ": "Ar_1S2", "2P10   ": "Ar_2P10", "2P9    ": "Ar_2P9",
    "2P8    ": "Ar_2P8", "2P7    ": "Ar_2P7", "2P6    ": "Ar_2P6",
    "2P5    ": "Ar_2P5", "2P4    ": "Ar_2P4", "2P3    ": "Ar_2P3",
    "2P2    ": "Ar_2P2", "2P1    ": "Ar_2P1", "3D6    ": "Ar_3D6",
    "3D5    ": "Ar_3D5", "3D3    ": "Ar_3D3", "3D4!   ": "Ar_3D4!",
    "3D4    ": "Ar_3D4", "3D1!!  ": "Ar_3D1!!", "2S5    ": "Ar_2S5",
    "2S4    ": "Ar_2S4", "3D1!   ": "Ar_3D1!", "3D2    ": "Ar_3D2",
    "3S1!!!!": "Ar_3S1!!!!", "3S1!!  ": "Ar_3S1!!", "3S1!!! ": "Ar_3S1!!!",
    "2S3    ": "Ar_2S3", "2S2    ": "Ar_2S2", "3S1!   ": "Ar_3S1!",
    "4D5    ": "Ar_4D5", "3S4    ": "Ar_3S4", "4D2    ": "Ar_4D2",
    "4S1!   ": "Ar_4S1!", "3S2    ": "Ar_3S2", "5D5    ": "Ar_5D5",
    "4S4    ": "Ar_4S4", "5D2    ": "Ar_5D2", "6D5    ": "Ar_6D5",
    "5S1!   ": "Ar_5S1!", "4S2    ": "Ar_4S2", "5S4    ": "Ar_5S4",
    "6D2    ": "Ar_6D2", "HIGH   ": "Ar_Higher",
}

ARGON_DIMER = "Ar_Dimer"
ARGON_EXCIMER = "Ar_Excimer"
ARGON_DIMER_ENERGY = 14.71

# Rate marker: ground-state rate computed from the oscillator strength
FROM_OSC = None
GROUND = None


@dataclass(frozen=True)
class RadiativeData:
    """
    Radiative decay of one level.

    branches holds (rate [ns^-1] or FROM_OSC, target label or GROUND).
    """
    osc: float = 0.
    branches: Tuple[Tuple[Optional[float], Optional[str]], ...] = ()


_4S = ("Ar_1S5", "Ar_1S4", "Ar_1S3", "Ar_1S2")
_4P = ("Ar_2P10", "Ar_2P9", "Ar_2P8", "Ar_2P7", "Ar_2P6",
       "Ar_2P5", "Ar_2P4", "Ar_2P3", "Ar_2P2", "Ar_2P1")


def _rad(osc, rates, targets):
    return RadiativeData(osc, tuple(zip(rates, targets)))


ARGON_RADIATIVE: Dict[str, RadiativeData] = {
    # Metastables
    "Ar_1S5": RadiativeData(),
    "Ar_1S3": RadiativeData(),
    "Ar_1S4": _rad(0.0609, (0.119,), (GROUND,)),
    "Ar_1S2": _rad(0.25, (0.51,), (GROUND,)),
    "Ar_2P10": _rad(0., (0.0189, 5.43e-3, 9.8e-4, 1.9e-4), _4S),
    "Ar_2P9": _rad(0., (0.0331,), ("Ar_1S5",)),
    "Ar_2P8": _rad(0., (9.28e-3, 0.0215, 1.47e-3), ("Ar_1S5", "Ar_1S4", "Ar_1S2")),
    "Ar_2P7": _rad(0., (5.18e-3, 0.025, 2.43e-3, 1.06e-3), _4S),
    "Ar_2P6": _rad(0., (0.0245, 4.9e-3, 5.03e-3), ("Ar_1S5", "Ar_1S4", "Ar_1S2")),
    "Ar_2P5": _rad(0., (0.0402,), ("Ar_1S4",)),
    "Ar_2P4": _rad(0., (6.25e-4, 2.2e-5, 0.0186, 0.0139), _4S),
    "Ar_2P3": _rad(0., (3.8e-3, 8.47e-3, 0.0223), ("Ar_1S5", "Ar_1S4", "Ar_1S2")),
    "Ar_2P2": _rad(0., (6.39e-3, 1.83e-3, 0.0117, 0.0153), _4S),
    "Ar_2P1": _rad(0., (2.36e-4, 0.0445), ("Ar_1S4", "Ar_1S2")),
    "Ar_3D6": _rad(0., (8.1e-3, 7.73e-4, 1.2e-4, 3.6e-4),
                   ("Ar_2P10", "Ar_2P7", "Ar_2P4", "Ar_2P2")),
    "Ar_3D5": _rad(0.0011,
                   (7.4e-3, 3.9e-5, 3.09e-4, 1.37e-3, 5.75e-4, 3.2e-5, 1.4e-4,
                    1.7e-4, 2.49e-6, FROM_OSC),
                   ("Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5", "Ar_2P4",
                    "Ar_2P3", "Ar_2P2", "Ar_2P1", GROUND)),
    "Ar_3D3": _rad(0., (4.9e-3, 9.82e-5, 1.2e-4, 2.6e-4, 2.5e-3, 9.41e-5, 3.9e-4, 1.1e-4),
                   ("Ar_2P10", "Ar_2P9", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P4",
                    "Ar_2P3", "Ar_2P2")),
    "Ar_3D4!": _rad(0., (0.01593,), ("Ar_2P9",)),
    "Ar_3D4": _rad(0., (2.29e-3, 0.011, 8.8e-5, 2.53e-6),
                   ("Ar_2P9", "Ar_2P8", "Ar_2P6", "Ar_2P3")),
    "Ar_3D1!!": _rad(0., (5.85e-6, 1.2e-4, 5.7e-3, 7.3e-3, 2.e-4, 1.54e-6, 2.08e-5, 6.75e-7),
                     ("Ar_2P10", "Ar_2P9", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P4",
                      "Ar_2P3", "Ar_2P2")),
    "Ar_2S5": _rad(0., (4.9e-3, 0.011, 1.1e-3, 4.6e-4, 3.3e-3, 5.9e-5, 1.2e-4, 3.1e-4),
                   ("Ar_2P10", "Ar_2P9", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P4",
                    "Ar_2P3", "Ar_2P2")),
    "Ar_2S4": _rad(0.027,
                   (0.077, 2.44e-3, 8.9e-3, 4.6e-3, 2.7e-3, 1.3e-3, 4.5e-4, 2.9e-5,
                    3.e-5, 1.6e-4),
                   (GROUND, "Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5",
                    "Ar_2P4", "Ar_2P3", "Ar_2P2", "Ar_2P1")),
    "Ar_3D1!": _rad(0., (3.1e-3, 2.e-3, 0.015, 9.8e-6),
                    ("Ar_2P9", "Ar_2P8", "Ar_2P6", "Ar_2P3")),
    "Ar_3D2": _rad(0.0932,
                   (0.27, 1.35e-5, 9.52e-4, 0.011, 4.01e-5, 4.3e-3, 8.96e-4,
                    4.45e-5, 5.87e-5, 8.77e-4),
                   (GROUND, "Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5",
                    "Ar_2P4", "Ar_2P3", "Ar_2P2", "Ar_2P1")),
    "Ar_3S1!!!!": _rad(0., (7.51e-6, 4.3e-5, 8.3e-4, 5.01e-5, 2.09e-4, 0.013, 2.2e-3, 3.35e-6),
                       ("Ar_2P10", "Ar_2P9", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P4",
                        "Ar_2P3", "Ar_2P2")),
    "Ar_3S1!!": _rad(0., (1.89e-4, 1.52e-4, 7.21e-4, 3.69e-4, 3.76e-3, 1.72e-4, 5.8e-4, 6.2e-3),
                     ("Ar_2P10", "Ar_2P9", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P4",
                      "Ar_2P3", "Ar_2P2")),
    "Ar_3S1!!!": _rad(0., (7.36e-4, 4.2e-5, 9.3e-5, 0.015),
                      ("Ar_2P9", "Ar_2P8", "Ar_2P6", "Ar_2P3")),
    "Ar_2S3": _rad(0., (3.26e-3, 2.22e-3, 0.01, 5.1e-3),
                   ("Ar_2P10", "Ar_2P7", "Ar_2P4", "Ar_2P2")),
    "Ar_2S2": _rad(0.0119,
                   (0.035, 1.76e-3, 2.1e-4, 2.8e-4, 1.39e-3, 3.8e-4, 2.0e-3,
                    8.9e-3, 3.4e-3, 1.9e-3),
                   (GROUND, "Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5",
                    "Ar_2P4", "Ar_2P3", "Ar_2P2", "Ar_2P1")),
    "Ar_3S1!": _rad(0.106,
                    (0.313, 2.05e-5, 8.33e-5, 3.9e-4, 3.96e-4, 4.2e-4, 4.5e-3,
                     4.84e-5, 7.1e-3, 5.2e-3),
                    (GROUND, "Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5",
                     "Ar_2P4", "Ar_2P3", "Ar_2P2", "Ar_2P1")),
    "Ar_4D5": _rad(0.0019, (2.78e-3, 2.8e-4, 8.6e-4, 9.2e-4, 4.6e-4, 1.6e-4, FROM_OSC),
                   ("Ar_2P10", "Ar_2P8", "Ar_2P6", "Ar_2P5", "Ar_2P3", "Ar_2P2", GROUND)),
    "Ar_3S4": _rad(0.0144,
                   (4.21e-4, 2.e-3, 1.7e-3, 7.2e-4, 3.5e-4, 1.2e-4, 4.2e-6, 3.3e-5,
                    9.7e-5, FROM_OSC),
                   ("Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5", "Ar_2P4",
                    "Ar_2P3", "Ar_2P2", "Ar_2P1", GROUND)),
    "Ar_4D2": _rad(0.048, (1.7e-4, FROM_OSC), ("Ar_2P7", GROUND)),
    "Ar_4S1!": _rad(0.0209, (1.05e-3, 3.1e-5, 2.5e-5, 4.0e-4, 5.8e-5, 1.2e-4, FROM_OSC),
                    ("Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5", "Ar_2P3", GROUND)),
    "Ar_3S2": _rad(0.0221,
                   (2.85e-4, 5.1e-5, 5.3e-5, 1.6e-4, 1.5e-4, 6.0e-4, 2.48e-3, 9.6e-4,
                    3.59e-4, FROM_OSC),
                   ("Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5", "Ar_2P4",
                    "Ar_2P3", "Ar_2P2", "Ar_2P1", GROUND)),
    "Ar_5D5": _rad(0.0041,
                   (2.2e-3, 1.1e-4, 7.6e-5, 4.2e-4, 2.4e-4, 2.1e-4, 2.4e-4, 1.2e-4, FROM_OSC),
                   ("Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5", "Ar_2P4",
                    "Ar_2P3", "Ar_2P2", GROUND)),
    "Ar_4S4": _rad(0.0139, (1.9e-4, 1.1e-3, 5.2e-4, 5.1e-4, 9.4e-5, 5.4e-5, FROM_OSC),
                   ("Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P6", "Ar_2P5", "Ar_2P4", GROUND)),
    "Ar_5D2": _rad(0.0426, (5.9e-5, 9.0e-6, 1.5e-4, 3.1e-5, FROM_OSC),
                   ("Ar_2P8", "Ar_2P7", "Ar_2P5", "Ar_2P2", GROUND)),
    "Ar_6D5": _rad(0.00075, (1.9e-3, 4.2e-4, 3.e-4, 5.1e-5, 6.6e-5, 1.21e-4, FROM_OSC),
                   ("Ar_2P10", "Ar_2P6", "Ar_2P5", "Ar_2P4", "Ar_2P3", "Ar_2P1", GROUND)),
    "Ar_5S1!": _rad(0.00051, (7.7e-5, FROM_OSC), ("Ar_2P5", GROUND)),
    "Ar_4S2": _rad(0.00074, (4.5e-4, 2.e-4, 2.1e-4, 1.2e-4, 1.8e-4, 9.e-4, 3.3e-4, FROM_OSC),
                   ("Ar_2P10", "Ar_2P8", "Ar_2P7", "Ar_2P5", "Ar_2P4", "Ar_2P3",
                    "Ar_2P2", GROUND)),
    # Berkowitz estimate for the sum of ns levels with n >= 8
    "Ar_5S4": _rad(0.0211, (3.6e-4, 1.2e-4, 1.5e-4, 1.4e-4, 7.5e-5, FROM_OSC),
                   ("Ar_2P8", "Ar_2P6", "Ar_2P4", "Ar_2P3", "Ar_2P2", GROUND)),
    # Berkowitz estimate for the sum of strong nd levels with n >= 6
    "Ar_6D2": _rad(0.0574, (3.33e-3, FROM_OSC), ("Ar_2P7", GROUND)),
}

# Sum of higher J = 1 states, redistributed equally over the five levels below
ARGON_HIGHER_RATE = 100.
ARGON_HIGHER_TARGETS = ("Ar_6D5", "Ar_5S1!", "Ar_4S2", "Ar_5S4", "Ar_6D2")

# Three-body excimer formation [cm^6/ns] and two-body mixing to 1S4 [cm^3/ns]
ARGON_METASTABLE_COLLISIONS = {
    "Ar_1S5": (1.1e-41, 2.1e-24),
    "Ar_1S3": (0.83e-41, 5.3e-24),
}

# Collisional transfer within the 4p manifold [cm^3/ns]
ARGON_4P_MIXING: Dict[str, Tuple[Tuple[str, float], ...]] = {
    "Ar_2P2": (("Ar_2P3", 0.5e-21),),
    "Ar_2P3": (("Ar_2P4", 27.5e-21), ("Ar_2P5", 0.3e-21), ("Ar_2P6", 44.0e-21),
               ("Ar_2P7", 1.4e-21), ("Ar_2P8", 1.9e-21), ("Ar_2P9", 0.8e-21)),
    "Ar_2P4": (("Ar_2P3", 23.0e-21), ("Ar_2P5", 0.7e-21), ("Ar_2P6", 4.8e-21),
               ("Ar_2P7", 3.2e-21), ("Ar_2P8", 1.4e-21), ("Ar_2P9", 3.3e-21)),
    "Ar_2P5": (("Ar_2P4", 1.7e-21), ("Ar_2P6", 11.3e-21), ("Ar_2P8", 9.5e-21)),
    "Ar_2P6": (("Ar_2P7", 4.1e-21), ("Ar_2P8", 6.0e-21), ("Ar_2P9", 1.0e-21)),
    "Ar_2P7": (("Ar_2P6", 2.5e-21), ("Ar_2P8", 14.3e-21), ("Ar_2P9", 23.3e-21)),
    "Ar_2P8": (("Ar_2P6", 0.3e-21), ("Ar_2P7", 0.8e-21), ("Ar_2P9", 18.2e-21),
               ("Ar_2P10", 1.0e-21)),
    "Ar_2P9": (("Ar_2P8", 6.8e-21), ("Ar_2P10", 5.1e-21)),
}

# Total 4p -> 4s transfer, shared equally among the four 4s levels [cm^3/ns]
ARGON_4P_TO_4S = {
    "Ar_2P1": 1.6e-20,
    "Ar_2P2": 5.3e-20,
    "Ar_2P3": 4.7e-20,
    "Ar_2P4": 3.9e-20,
    "Ar_2P7": 5.5e-20,
    "Ar_2P8": 3.0e-20,
    "Ar_2P9": 3.5e-20,
    "Ar_2P10": 2.0e-20,
}

ARGON_4S_LEVELS = _4S
ARGON_4P_LEVELS = _4P

# 3d and 5s levels, transfer to each 4p level with 0.1 * K_4P_TRANSFER
ARGON_3D5S_LEVELS = (
    "Ar_3D6", "Ar_3D5", "Ar_3D3", "Ar_3D4!", "Ar_3D4", "Ar_3D1!!", "Ar_3D1!",
    "Ar_3D2", "Ar_3S1!!!!", "Ar_3S1!!", "Ar_3S1!!!", "Ar_3S1!", "Ar_2S5",
    "Ar_2S4", "Ar_2S3", "Ar_2S2",
)
# Higher levels: 4p transfer plus Hornbeck-Molnar ionisation
ARGON_HIGH_LEVELS = (
    "Ar_4D5", "Ar_3S4", "Ar_4D2", "Ar_4S1!", "Ar_3S2", "Ar_5D5", "Ar_4S4",
    "Ar_5D2", "Ar_6D5", "Ar_5S1!", "Ar_4S2", "Ar_5S4", "Ar_6D2",
)
# Order of magnitude estimate
K_4P_TRANSFER = 1.e-20
K_HORNBECK_MOLNAR = 2.e-18

# Levels quenched with the "other 4p" average rate constant
ARGON_4P_AVERAGED = ("Ar_2P10", "Ar_2P9", "Ar_2P7", "Ar_2P4", "Ar_2P3", "Ar_2P2")
# Non-resonant levels quenched with hard-sphere rate constants
ARGON_3D_NONRESONANT = (
    "Ar_3D6", "Ar_3D3", "Ar_3D4!", "Ar_3D4", "Ar_3D1!!", "Ar_3D1!",
    "Ar_3S1!!!!", "Ar_3S1!!", "Ar_3S1!!!",
)
ARGON_5S_NONRESONANT = ("Ar_2S5", "Ar_2S3")

# Collision radii of the argon 3d and 5s states [cm]
R_AR_3D = 436.e-10
R_AR_5S = 635.e-10

# Quenching outcome: pure loss, Penning with eta^0.4, or a fixed probability
LOSS = 'loss'
PENNING_WK = 'wk'
Outcome = Union[str, float]


@dataclass(frozen=True)
class QuencherData:
    """
    Quenching of argon excited states by one admixture.

    Attributes:
        radius: Hard-sphere collision radius [cm]
        optical_name: Species name used for the photoabsorption lookup
        rates: Level label -> (rate constant [cm^3/ns], outcome)
        fallback: Outcome for Watanabe-Katsuura and hard-sphere rates
    """
    radius: float
    optical_name: str
    rates: Dict[str, Tuple[float, Outcome]] = field(default_factory=dict)
    fallback: Outcome = PENNING_WK


def _with_4p_average(rates: Dict[str, Tuple[float, Outcome]],
                     average: Tuple[float, Outcome]) -> Dict[str, Tuple[float, Outcome]]:
    out = dict(rates)
    for label in ARGON_4P_AVERAGED:
        out[label] = average
    return out


# Isobutane 4p rates scaled from ethane by collision radius and reduced mass
_FR_ISO = (340. + 250.) / (340. + 195.)
F4P_ISOBUTANE = _FR_ISO**2 * np.sqrt((30.1 / 58.1) * (39.9 + 58.1) / (39.9 + 30.1))

QUENCHERS: Dict[str, QuencherData] = {
    "CO2": QuencherData(
        radius=165.e-10, optical_name="CO2", fallback=PENNING_WK,
        rates=_with_4p_average({
            "Ar_1S5": (5.3e-19, LOSS), "Ar_1S4": (5.0e-19, LOSS),
            "Ar_1S3": (5.9e-19, LOSS), "Ar_1S2": (7.4e-19, LOSS),
            "Ar_2P8": (6.4e-19, LOSS), "Ar_2P6": (6.1e-19, LOSS),
            "Ar_2P5": (6.6e-19, LOSS), "Ar_2P1": (6.2e-19, LOSS),
        }, (6.33e-19, LOSS))),
    "CH4": QuencherData(
        radius=190.e-10, optical_name="CH4", fallback=PENNING_WK,
        rates=_with_4p_average({
            "Ar_1S5": (4.55e-19, LOSS), "Ar_1S4": (4.5e-19, LOSS),
            "Ar_1S3": (5.30e-19, LOSS), "Ar_1S2": (5.7e-19, LOSS),
            "Ar_2P8": (7.4e-19, PENNING_WK), "Ar_2P6": (3.4e-19, PENNING_WK),
            "Ar_2P5": (6.0e-19, PENNING_WK), "Ar_2P1": (9.3e-19, PENNING_WK),
        }, (6.53e-19, PENNING_WK))),
    "C2H6": QuencherData(
        radius=195.e-10, optical_name="C2H6", fallback=PENNING_WK,
        rates=_with_4p_average({
            "Ar_1S5": (5.29e-19, PENNING_WK), "Ar_1S4": (6.2e-19, PENNING_WK),
            "Ar_1S3": (6.53e-19, PENNING_WK), "Ar_1S2": (10.7e-19, PENNING_WK),
            "Ar_2P8": (9.2e-19, PENNING_WK), "Ar_2P6": (4.8e-19, PENNING_WK),
            "Ar_2P5": (9.9e-19, PENNING_WK), "Ar_2P1": (11.0e-19, PENNING_WK),
        }, (8.7e-19, PENNING_WK))),
    "iC4H10": QuencherData(
        radius=250.e-10, optical_name="nC4H10", fallback=PENNING_WK,
        rates=_with_4p_average({
            "Ar_1S5": (7.1e-19, PENNING_WK), "Ar_1S4": (6.1e-19, PENNING_WK),
            "Ar_1S3": (8.5e-19, PENNING_WK), "Ar_1S2": (11.0e-19, PENNING_WK),
            "Ar_2P8": (F4P_ISOBUTANE * 9.2e-19, PENNING_WK),
            "Ar_2P6": (F4P_ISOBUTANE * 4.8e-19, PENNING_WK),
            "Ar_2P5": (F4P_ISOBUTANE * 9.9e-19, PENNING_WK),
            "Ar_2P1": (F4P_ISOBUTANE * 11.0e-19, PENNING_WK),
        }, (F4P_ISOBUTANE * 5.5e-19, PENNING_WK))),
    "C2H2": QuencherData(
        radius=165.e-10, optical_name="C2H2", fallback=PENNING_WK,
        rates=_with_4p_average({
            "Ar_1S5": (5.6e-19, 0.61), "Ar_1S4": (4.6e-19, PENNING_WK),
            "Ar_1S3": (5.6e-19, 0.61), "Ar_1S2": (8.7e-19, PENNING_WK),
            "Ar_2P8": (5.0e-19, 0.3), "Ar_2P6": (5.7e-19, 0.3),
            "Ar_2P5": (6.0e-19, 0.3), "Ar_2P1": (5.3e-19, 0.3),
        }, (5.5e-19, 0.3))),
    "CF4": QuencherData(
        radius=235.e-10, optical_name="CF4", fallback=LOSS,
        rates=_with_4p_average({
            "Ar_1S5": (0.33e-19, LOSS), "Ar_1S3": (0.26e-19, LOSS),
            "Ar_2P8": (1.7e-19, LOSS), "Ar_2P6": (1.7e-19, LOSS),
            "Ar_2P5": (1.6e-19, LOSS), "Ar_2P1": (2.2e-19, LOSS),
        }, (1.8e-19, LOSS))),
}

# Optical data name for species whose own photoabsorption data is missing
OPTICAL_NAME_SUBSTITUTES = {"iC4H10": "nC4H10"}

# Green-Sawada fit parameters (Gamma_s, Gamma_b, T_s) [eV]; T_a = 1000 eV
GREEN_SAWADA_TA = 1000.
GREEN_SAWADA: Dict[str, Tuple[float, float, float]] = {
    "He": (15.5, 24.5, -2.25),
    "He-3": (15.5, 24.5, -2.25),
    "Ne": (24.3, 21.6, -6.49),
    "Ar": (6.92, 7.85, 6.87),
    "Kr": (7.95, 13.5, 3.90),
    "Xe": (7.93, 11.5, 3.81),
    "H2": (7.07, 7.7, 1.87),
    "D2": (7.07, 7.7, 1.87),
    "N2": (13.8, 15.6, 4.71),
    "O2": (18.5, 12.1, 1.86),
    "CH4": (7.06, 12.5, 3.45),
    "H2O": (12.8, 12.6, 1.28),
    "CO": (13.3, 14.0, 2.03),
    "C2H2": (9.28, 5.8, 1.37),
    "NO": (10.4, 9.5, -4.30),
    "CO2": (12.3, 13.8, -2.46),
}


def rate_constant_wk(energy: float, osc: float, pacs: float, recoil1: float,
                     recoil2: float, temperature: float) -> float:
    """
    Watanabe-Katsuura rate constant for long-range energy transfer.

    Parameters:
        energy: Excitation energy of the donor level [eV]
        osc: Oscillator strength of the donor transition
        pacs: Photoabsorption cross section of the quencher at that energy [cm^2]
        recoil1, recoil2: Recoil factors (1 + m_e / M) of donor and quencher
        temperature: Gas temperature [K]

    Returns:
        Rate constant [cm^3/ns]
    """
    m1 = ELECTRON_MASS_GRAMME / (recoil1 - 1.)
    m2 = ELECTRON_MASS_GRAMME / (recoil2 - 1.)
    # Reduced mass [amu]
    m_red = (m1 * m2 / (m1 + m2)) / ATOMIC_MASS_UNIT
    u_a = (RYDBERG_ENERGY / energy) * osc
    u_q = ((2. * RYDBERG_ENERGY / energy) * pacs /
           (4. * np.pi**2 * FINE_STRUCTURE_CONSTANT * BOHR_RADIUS**2))
    return 2.591e-19 * (u_a * u_q)**0.4 * (temperature / m_red)**0.3


def rate_constant_hard_sphere(r1: float, r2: float, recoil1: float, recoil2: float,
                              temperature: float) -> float:
    """
    Hard-sphere rate constant sigma * <v_rel>.

    Parameters:
        r1, r2: Collision radii [cm]
        recoil1, recoil2: Recoil factors of the two species
        temperature: Gas temperature [K]

    Returns:
        Rate constant [cm^3/ns]
    """
    r = r1 + r2
    sigma = r * r * np.pi
    m1 = ELECTRON_MASS / (recoil1 - 1.)
    m2 = ELECTRON_MASS / (recoil2 - 1.)
    m_red = m1 * m2 / (m1 + m2)
    vel = SPEED_OF_LIGHT * np.sqrt(8. * BOLTZMANN_CONSTANT * temperature / (np.pi * m_red))
    return sigma * vel
