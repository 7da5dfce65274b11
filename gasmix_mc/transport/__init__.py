"""Transport module: rate tables, collision samplers and the gas medium."""

from gasmix_mc.transport.tables import MixtureTableBuilder, CompiledTables, EnergyGrid
from gasmix_mc.transport.deexcitation import DeexcitationChannel, DeexcitationEngine
from gasmix_mc.transport.photon import PhotonCollisionTable
from gasmix_mc.transport.sampler import CollisionSampler
from gasmix_mc.transport.medium import GasMedium

__all__ = [
    "MixtureTableBuilder",
    "CompiledTables",
    "EnergyGrid",
    "DeexcitationChannel",
    "DeexcitationEngine",
    "PhotonCollisionTable",
    "CollisionSampler",
    "GasMedium",
]
