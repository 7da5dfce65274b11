"""Shared fixtures: providers, seeded random stream and ready-built media."""

import numpy as np
import pytest

from gasmix_mc.core.rng import RandomStream
from gasmix_mc.physics.model_gas import ModelGasDatabase, ModelOpticalData
from gasmix_mc.transport.medium import GasMedium


@pytest.fixture(scope="session")
def database():
    return ModelGasDatabase()


@pytest.fixture(scope="session")
def optical():
    return ModelOpticalData()


@pytest.fixture
def rng():
    return RandomStream(12345)


@pytest.fixture
def argon(database, optical):
    """Pure argon at 293.15 K and 760 Torr, electron range 0-40 eV."""
    gas = GasMedium(database, optical, seed=1)
    assert gas.initialise()
    return gas


@pytest.fixture
def argon_dxc(database, optical):
    """Pure argon with deexcitation cascades."""
    gas = GasMedium(database, optical, seed=3)
    gas.enable_deexcitation()
    assert gas.initialise()
    return gas


@pytest.fixture
def argon_co2(database, optical):
    """Ar/CO2 90:10 with deexcitation cascades."""
    gas = GasMedium(database, optical, seed=2)
    gas.set_composition({'Ar': 90., 'CO2': 10.})
    gas.enable_deexcitation()
    assert gas.initialise()
    return gas


def level_index(gas, description):
    """Index of the first level whose description matches."""
    for i in range(gas.n_levels):
        if gas.get_level(i).description == description:
            return i
    raise KeyError(description)


def channel_index(tables, label):
    for k, chan in enumerate(tables.channels):
        if chan.label == label:
            return k
    raise KeyError(label)


def unit(v):
    v = np.asarray(v, dtype=np.float64)
    return v / np.linalg.norm(v)
