"""
gasmix_mc: Electron and photon collision tables for gas mixtures

Scattering-rate tables, null-collision sampling, excited-state
relaxation cascades and photon absorption for Monte Carlo simulation
of gas-filled detectors.

Modules:
    core: Constants, configuration, errors, value types, random stream
    physics: Data providers, kinematics kernels, line shapes, spectroscopic data
    transport: Table builder, collision samplers, deexcitation, gas medium
"""

__version__ = "0.1.0"

from gasmix_mc.core.config import MixtureConfig
from gasmix_mc.core.rng import RandomStream
from gasmix_mc.transport.tables import MixtureTableBuilder
from gasmix_mc.transport.medium import GasMedium

__all__ = [
    "MixtureConfig",
    "RandomStream",
    "MixtureTableBuilder",
    "GasMedium",
]
