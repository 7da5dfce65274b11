"""Physics module: data providers, kinematics kernels, line shapes and spectroscopic data."""

from gasmix_mc.physics.providers import (
    CrossSectionRequest,
    CrossSectionData,
    CrossSectionProvider,
    OpticalDataProvider,
)
from gasmix_mc.physics.model_gas import ModelGasDatabase, ModelOpticalData

__all__ = [
    "CrossSectionRequest",
    "CrossSectionData",
    "CrossSectionProvider",
    "OpticalDataProvider",
    "ModelGasDatabase",
    "ModelOpticalData",
]
