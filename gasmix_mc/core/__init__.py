"""Core module: constants, configuration, errors and value types."""

from gasmix_mc.core.config import MixtureConfig
from gasmix_mc.core.exceptions import (
    GasMixError,
    ConfigurationError,
    TableStaleError,
    RangeExceeded,
    DataInconsistency,
    InvalidEnergy,
)
from gasmix_mc.core.rng import RandomStream
from gasmix_mc.core.types import (
    CollisionType,
    PhotonCollisionType,
    DxcType,
    ProductType,
    SecondaryType,
    SplittingFunction,
    Level,
    Product,
    CollisionCounters,
    ElectronCollision,
    PhotonCollision,
)

__all__ = [
    "MixtureConfig",
    "GasMixError",
    "ConfigurationError",
    "TableStaleError",
    "RangeExceeded",
    "DataInconsistency",
    "InvalidEnergy",
    "RandomStream",
    "CollisionType",
    "PhotonCollisionType",
    "DxcType",
    "ProductType",
    "SecondaryType",
    "SplittingFunction",
    "Level",
    "Product",
    "CollisionCounters",
    "ElectronCollision",
    "PhotonCollision",
]
