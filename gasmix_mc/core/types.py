"""
Value types shared by the table builder and the samplers.

Products of a deexcitation cascade are also exposed as a NumPy structured
array so that callers can copy a whole cascade out in one step.
"""

import numpy as np
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Sequence, Tuple


class CollisionType(IntEnum):
    """Electron collision categories."""
    ELASTIC = 0
    IONISATION = 1
    ATTACHMENT = 2
    INELASTIC = 3
    EXCITATION = 4
    SUPERELASTIC = 5


class PhotonCollisionType(IntEnum):
    """Photon collision categories."""
    ELASTIC = 0
    IONISATION = 1
    INELASTIC = 2
    EXCITATION = 3


class DxcType(IntEnum):
    """Deexcitation branch types."""
    RADIATIVE = 0
    COLLISIONAL_IONISING = 1
    COLLISIONAL_NON_IONISING = -1


class ProductType(IntEnum):
    """Deexcitation product types."""
    ELECTRON = -1
    PHOTON = 1


class SecondaryType(IntEnum):
    """Secondaries created in an ionising electron collision."""
    ELECTRON = -1
    ION = 1


class SplittingFunction(IntEnum):
    """Secondary electron energy distribution for ionising collisions."""
    OPAL_BEATY = 0
    GREEN_SAWADA = 1
    FLAT = 2


N_COLLISION_TYPES = len(CollisionType)
N_PHOTON_COLLISION_TYPES = len(PhotonCollisionType)


@dataclass(frozen=True)
class Level:
    """
    One scattering process of one gas species.

    Attributes:
        gas: Index of the species in the mixture
        category: Collision category
        threshold: Raw threshold energy from the provider [eV]
        energy_loss: Threshold divided by the recoil factor [eV]
        model: Angular distribution model (0 isotropic, 1 cut, 2 forward map)
        w_opal_beaty: Opal-Beaty splitting parameter [eV] (ionisation only)
        description: Human-readable label from the provider
        penning_r: Penning transfer probability
        penning_lambda: Penning transfer distance [cm]
    """
    gas: int
    category: CollisionType
    threshold: float
    energy_loss: float
    model: int
    w_opal_beaty: float = 0.
    description: str = ""
    penning_r: float = 0.
    penning_lambda: float = 0.


# Cascade products (time [ns], radial offset [cm], type, energy [eV])
PRODUCT_DTYPE = np.dtype([
    ('t', np.float64),
    ('s', np.float64),
    ('type', np.int8),
    ('energy', np.float64),
])


@dataclass(frozen=True)
class Product:
    """Secondary emitted in one step of a deexcitation cascade."""
    t: float
    s: float
    type: ProductType
    energy: float


def products_to_array(products: Sequence[Product]) -> np.ndarray:
    """Copy a product list into a structured array."""
    out = np.zeros(len(products), dtype=PRODUCT_DTYPE)
    for i, p in enumerate(products):
        out[i] = (p.t, p.s, int(p.type), p.energy)
    return out


@dataclass
class CollisionCounters:
    """Per-category and per-level collision tallies."""

    n_levels: int = 0
    electron: np.ndarray = field(default_factory=lambda: np.zeros(N_COLLISION_TYPES, dtype=np.int64))
    levels: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    photon: np.ndarray = field(default_factory=lambda: np.zeros(N_PHOTON_COLLISION_TYPES, dtype=np.int64))
    n_penning: int = 0

    def __post_init__(self):
        if len(self.levels) != self.n_levels:
            self.levels = np.zeros(self.n_levels, dtype=np.int64)

    def reset(self, n_levels: Optional[int] = None):
        if n_levels is not None:
            self.n_levels = n_levels
        self.electron = np.zeros(N_COLLISION_TYPES, dtype=np.int64)
        self.levels = np.zeros(self.n_levels, dtype=np.int64)
        self.photon = np.zeros(N_PHOTON_COLLISION_TYPES, dtype=np.int64)
        self.n_penning = 0

    def add_electron(self, category: CollisionType, level: int):
        self.electron[int(category)] += 1
        self.levels[level] += 1

    def add_photon(self, category: PhotonCollisionType):
        self.photon[int(category)] += 1

    @property
    def total(self) -> int:
        """Total number of electron collisions."""
        return int(self.electron.sum())

    @property
    def photon_total(self) -> int:
        return int(self.photon.sum())

    def by_category(self) -> dict:
        """Electron collision counts keyed by category."""
        return {t: int(self.electron[int(t)]) for t in CollisionType}

    def level_count(self, level: int) -> int:
        if level < 0 or level >= self.n_levels:
            raise IndexError(f"Level {level} does not exist ({self.n_levels} levels)")
        return int(self.levels[level])

    def get_statistics(self) -> dict:
        """Summary dictionary (electron and photon totals, Penning count)."""
        return {
            'electron_total': self.total,
            'electron': {t.name: int(self.electron[int(t)]) for t in CollisionType},
            'photon_total': self.photon_total,
            'photon': {t.name: int(self.photon[int(t)]) for t in PhotonCollisionType},
            'penning': self.n_penning,
        }


@dataclass(frozen=True)
class ElectronCollision:
    """
    Result of one sampled electron collision.

    Attributes:
        type: Collision category
        level: Index of the selected level
        energy: Kinetic energy after the collision [eV]
        direction: Unit direction after the collision
        secondaries: (SecondaryType, energy [eV]) pairs from ionisation
        n_deexcitation_products: Number of products in the deexcitation list
    """
    type: CollisionType
    level: int
    energy: float
    direction: np.ndarray
    secondaries: Tuple[Tuple[SecondaryType, float], ...] = ()
    n_deexcitation_products: int = 0


@dataclass(frozen=True)
class PhotonCollision:
    """
    Result of one sampled photon collision.

    For line absorption, level is the index of the absorbing deexcitation
    channel and n_secondaries the number of cascade products.
    """
    type: PhotonCollisionType
    level: int
    energy: float
    cos_theta: float
    n_secondaries: int
    secondary_energy: float
