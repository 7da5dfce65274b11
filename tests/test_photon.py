"""Tests for photon absorption rates and sampling."""

import logging

import numpy as np
import pytest

from gasmix_mc.core.constants import N_ENERGY_STEPS_GAMMA
from gasmix_mc.core.exceptions import ConfigurationError, InvalidEnergy
from gasmix_mc.core.types import PhotonCollisionType, ProductType
from gasmix_mc.transport.medium import GasMedium

from conftest import channel_index


class ArgonOnlyOptical:
    """Optical provider restricted to argon."""

    def __init__(self, base):
        self.base = base

    def is_available(self, name):
        return name == 'Ar' and self.base.is_available(name)

    def photoabsorption(self, name, energy):
        return self.base.photoabsorption(name, energy)


class TestContinuum:

    def test_layout(self, argon):
        photon = argon.tables.photon
        assert photon is not None
        assert photon.e_final == pytest.approx(20.)
        assert len(photon.total) == N_ENERGY_STEPS_GAMMA
        assert photon.n_terms == 2
        assert photon.term_type == (PhotonCollisionType.IONISATION,
                                    PhotonCollisionType.INELASTIC)

    def test_no_lines_without_deexcitation(self, argon):
        photon = argon.tables.photon
        assert photon.n_lines == 0
        assert not photon.use_lines

    def test_rate_below_and_above_threshold(self, argon):
        assert argon.get_photon_collision_rate(10.) == 0.
        assert argon.get_photon_collision_rate(18.) > 0.

    def test_rate_scales_with_pressure(self, argon):
        rate = argon.get_photon_collision_rate(18.)
        argon.set_pressure(380.)
        assert argon.get_photon_collision_rate(18.) == pytest.approx(0.5 * rate, rel=1e-9)

    def test_ionisation(self, argon):
        for _ in range(100):
            c = argon.sample_photon_collision(20.)
            assert c.type == PhotonCollisionType.IONISATION
            assert c.n_secondaries == 1
            assert c.secondary_energy == pytest.approx(20. - 15.7596)
            assert -1. <= c.cos_theta <= 1.
        assert argon.counters.photon[int(PhotonCollisionType.IONISATION)] == 100

    def test_partial_ionisation_yield(self, database, optical):
        gas = GasMedium(database, optical, seed=9)
        gas.set_composition({'CO2': 1.})
        counts = {t: 0 for t in PhotonCollisionType}
        for _ in range(2000):
            c = gas.sample_photon_collision(15.)
            counts[c.type] += 1
            if c.type == PhotonCollisionType.INELASTIC:
                assert c.n_secondaries == 0
                assert c.secondary_energy == 0.
        fraction = counts[PhotonCollisionType.IONISATION] / 2000.
        assert fraction == pytest.approx(0.6, abs=0.05)

    def test_invalid_energy(self, argon, caplog):
        with pytest.raises(InvalidEnergy):
            argon.sample_photon_collision(0.)
        with caplog.at_level(logging.WARNING):
            rate = argon.get_photon_collision_rate(-1.)
        assert rate == pytest.approx(argon.tables.photon.total[0])
        assert "greater than zero" in caplog.text

    def test_automatic_adjustment(self, argon):
        argon.sample_photon_collision(30.)
        assert argon.config.max_photon_energy == pytest.approx(31.5)
        assert argon.tables.photon.e_final == pytest.approx(31.5)

    def test_no_adjustment(self, argon):
        argon.disable_energy_range_adjustment()
        rate = argon.get_photon_collision_rate(30.)
        assert argon.tables.photon.e_final == pytest.approx(20.)
        assert rate == pytest.approx(argon.tables.photon.total[-1])


class TestLines:

    def test_line_table(self, argon_dxc):
        tables = argon_dxc.tables
        photon = tables.photon
        assert photon.use_lines
        labels = [tables.channels[k].label for k in photon.line_channel]
        assert "Ar_1S4" in labels and "Ar_1S2" in labels
        assert "Ar_1S5" not in labels
        assert np.all(photon.line_cf > 0.)

    def test_resonance_absorption(self, argon_dxc):
        tables = argon_dxc.tables
        chan = tables.channels[channel_index(tables, "Ar_1S4")]
        on_line = argon_dxc.get_photon_collision_rate(chan.energy)
        assert on_line > 0.
        assert argon_dxc.get_photon_collision_rate(11.) == 0.
        assert argon_dxc.get_photon_collision_rate(chan.energy - 2. * chan.width) == 0.

    def test_line_profile_peak(self, argon_dxc):
        tables = argon_dxc.tables
        chan = tables.channels[channel_index(tables, "Ar_1S4")]
        centre = argon_dxc.get_photon_collision_rate(chan.energy)
        off = argon_dxc.get_photon_collision_rate(chan.energy + 10. * chan.doppler_sigma)
        assert 0. < off < centre

    def test_line_absorption_runs_cascade(self, argon_dxc):
        tables = argon_dxc.tables
        k = channel_index(tables, "Ar_1S4")
        chan = tables.channels[k]
        c = argon_dxc.sample_photon_collision(chan.energy)
        assert c.type == PhotonCollisionType.EXCITATION
        assert c.level == k
        assert c.cos_theta == 1.
        assert c.energy == 0.
        assert c.n_secondaries == argon_dxc.n_deexcitation_products == 1
        product = argon_dxc.get_deexcitation_product(0)
        assert product.type == ProductType.PHOTON
        assert abs(product.energy - chan.energy) < chan.width
        assert argon_dxc.counters.photon[int(PhotonCollisionType.EXCITATION)] == 1

    def test_radiation_trapping_switch(self, argon_dxc):
        tables = argon_dxc.tables
        chan = tables.channels[channel_index(tables, "Ar_1S4")]
        argon_dxc.disable_radiation_trapping()
        assert argon_dxc.get_photon_collision_rate(chan.energy) == 0.
        assert not argon_dxc.tables.photon.use_lines
        # Line shapes are still attached to the channels
        assert argon_dxc.tables.photon.n_lines > 0
        argon_dxc.enable_radiation_trapping()
        assert argon_dxc.get_photon_collision_rate(chan.energy) > 0.


class TestMissingOpticalData:

    @pytest.fixture
    def gas(self, database, optical):
        gas = GasMedium(database, ArgonOnlyOptical(optical), seed=3)
        gas.set_composition({'Ar': 90., 'CO2': 10.})
        gas.enable_deexcitation()
        return gas

    def test_photon_table_unavailable(self, gas, caplog):
        with caplog.at_level(logging.WARNING):
            assert gas.initialise()
        assert "Photon collision rates could not be calculated" in caplog.text
        assert gas.tables.photon is None
        assert not gas.tables.deexcitation
        assert gas.tables.channels == ()
        with pytest.raises(ConfigurationError):
            gas.get_photon_collision_rate(15.)
        with pytest.raises(ConfigurationError):
            gas.sample_photon_collision(15.)

    def test_deexcitation_unavailable(self, gas):
        assert gas.initialise()
        with pytest.raises(ConfigurationError, match="switched off"):
            gas.compute_deexcitation(5)

    def test_electron_sampling_still_works(self, gas):
        for _ in range(200):
            c = gas.sample_electron_collision(15.)
            assert c.n_deexcitation_products == 0
