"""Tests for the numba kinematics kernels and the random stream."""

import numpy as np
import pytest

from gasmix_mc.core.constants import SMALL
from gasmix_mc.physics.kinematics import (
    anisotropic_cosine,
    elastic_recoil,
    flat_energy,
    green_sawada_energy,
    locate_level,
    opal_beaty_energy,
    rotate_direction,
    scattering_parameters,
    scattering_parameters_array,
)


class TestSecondaryEnergy:

    def test_opal_beaty_limits(self):
        e, loss, w = 100., 15.76, 10.
        assert opal_beaty_energy(w, e, loss, 0.) == pytest.approx(0., abs=1e-12)
        assert opal_beaty_energy(w, e, loss, 1.) == pytest.approx(0.5 * (e - loss), rel=1e-9)

    def test_opal_beaty_statistics(self, rng):
        """Fraction of secondaries below w follows atan(1) / atan(Tmax / w)."""
        e, loss, w = 100., 15.76, 10.
        n = 20000
        samples = np.array([opal_beaty_energy(w, e, loss, rng.uniform()) for _ in range(n)])
        t_max = 0.5 * (e - loss)
        assert samples.min() >= 0.
        assert samples.max() <= t_max * (1. + 1e-9)
        expected = np.arctan(1.) / np.arctan(t_max / w)
        assert np.mean(samples < w) == pytest.approx(expected, abs=0.02)

    def test_green_sawada_limits(self):
        gs, gb, ts, ta = 6.92, 7.85, 6.87, 1000.
        tb = 2. * 15.7596
        e, loss = 200., 15.76
        assert green_sawada_energy(gs, gb, ts, ta, tb, e, loss, 0.) == pytest.approx(0., abs=1e-9)
        assert green_sawada_energy(gs, gb, ts, ta, tb, e, loss, 1.) == pytest.approx(
            0.5 * (e - loss), rel=1e-9)

    def test_flat(self):
        assert flat_energy(30., 10., 0.25) == pytest.approx(5.)


class TestScatteringParameters:

    def test_isotropic(self):
        assert scattering_parameters(0, 0.9) == (1., 0.5)
        assert scattering_parameters(-1, 0.9) == (1., 0.5)

    def test_model_two_passes_parameter(self):
        cut, par = scattering_parameters(2, 0.3)
        assert cut == 1.
        assert par == pytest.approx(0.3)

    def test_model_one_without_cut(self):
        cut, par = scattering_parameters(1, 0.8)
        assert cut == 1.
        assert par == pytest.approx(0.8)

    def test_model_one_with_cut(self):
        cut, par = scattering_parameters(1, 1.2)
        thetac = np.arcsin(2. * np.sqrt(0.7 - 0.49))
        assert cut == pytest.approx(thetac * 2. / np.pi)
        assert par == pytest.approx(0.7 * (1. - np.cos(thetac)) / np.sin(thetac)**2 + 0.5)
        assert 0. < cut < 1.

    def test_array_version(self):
        cut, par = scattering_parameters_array(1, np.array([0.2, 1.2]))
        assert cut[0] == 1. and par[0] == pytest.approx(0.2)
        assert cut[1] == pytest.approx(scattering_parameters(1, 1.2)[0])


class TestAngularRemap:

    def test_model_one(self):
        assert anisotropic_cosine(1, 0.1, 1., 0.7, 0.5, 0.2) == pytest.approx(0.5)
        assert anisotropic_cosine(1, 0.1, 1., 0.7, 0.5, 0.9) == pytest.approx(-0.5)
        assert anisotropic_cosine(1, 0.1, 0.4, 0.7, 1., 0.) == pytest.approx(0.6)

    def test_model_two(self):
        assert anisotropic_cosine(2, 0., 1., 0.3, 0., 0.) == pytest.approx(0.3)
        assert anisotropic_cosine(2, 1., 1., 0.3, 0., 0.) == pytest.approx(1.)
        assert anisotropic_cosine(2, -1., 1., 0.3, 0., 0.) == pytest.approx(-1.)

    def test_isotropic_unchanged(self):
        assert anisotropic_cosine(0, -0.42, 1., 0.5, 0.9, 0.9) == pytest.approx(-0.42)


class TestRecoil:

    S1 = 1. + 5.485799e-4 / 39.948

    def test_forward_elastic_keeps_energy(self):
        e1, ctheta, stheta = elastic_recoil(10., 0., 1., self.S1)
        assert e1 == pytest.approx(10., rel=1e-9)
        assert ctheta == pytest.approx(1.)
        assert stheta == pytest.approx(0., abs=1e-9)

    def test_backward_elastic_loses_little(self):
        s1 = self.S1
        s2 = s1 * s1 / (s1 - 1.)
        e1, ctheta, _ = elastic_recoil(10., 0., -1., s1)
        assert e1 == pytest.approx(10. * (1. - 4. / s2), rel=1e-9)
        assert e1 < 10.
        assert ctheta < 0.

    def test_inelastic_energy_loss(self):
        e1, _, _ = elastic_recoil(20., 11.5, 0.3, self.S1)
        assert 0. < e1 < 20. - 11.5 + 1e-3

    def test_energy_floor(self):
        e1, _, _ = elastic_recoil(10., 10. - 1.e-4, 0., self.S1)
        assert e1 >= SMALL


class TestRotation:

    def test_along_z(self):
        d = rotate_direction(np.array([0., 0., 1.]), np.cos(0.3), np.sin(0.3), 0.)
        assert d == pytest.approx([np.sin(0.3), 0., np.cos(0.3)])

    def test_preserves_norm(self, rng):
        d = np.array([0.3, -0.5, 0.8])
        d /= np.linalg.norm(d)
        for _ in range(100):
            ct = 1. - 2. * rng.uniform()
            new = rotate_direction(d, ct, np.sqrt(1. - ct * ct), 2. * np.pi * rng.uniform())
            assert np.linalg.norm(new) == pytest.approx(1., abs=1e-9)
            # Polar angle is measured from the incoming direction
            assert np.dot(new, d) == pytest.approx(ct, abs=1e-9)
            d = new


class TestLocateLevel:

    @pytest.mark.parametrize("u,expected", [
        (0.0, 0), (0.1, 0), (0.2, 0), (0.3, 1), (0.5, 1), (0.7, 2), (0.99, 2), (1.0, 2),
    ])
    def test_first_index_at_or_above(self, u, expected):
        assert locate_level(np.array([0.2, 0.5, 1.0]), u) == expected

    def test_zero_probability_levels_are_skipped(self):
        assert locate_level(np.array([0.0, 0.0, 0.4, 0.4, 1.0]), 0.5) == 4


class TestRandomStream:

    def test_reproducible(self, rng):
        from gasmix_mc.core.rng import RandomStream
        a = [rng.uniform() for _ in range(5)]
        rng.seed(12345)
        assert [rng.uniform() for _ in range(5)] == a
        assert RandomStream(7).uniform() == RandomStream(7).uniform()

    def test_uniform_pos_is_positive(self, rng):
        assert all(0. < rng.uniform_pos() <= 1. for _ in range(1000))

    def test_voigt_without_lorentzian_is_gaussian(self, rng):
        x = np.array([rng.voigt(0., 2., 0.) for _ in range(20000)])
        assert np.std(x) == pytest.approx(2., rel=0.03)
        assert np.mean(x) == pytest.approx(0., abs=0.05)

    def test_voigt_median(self, rng):
        x = np.array([rng.voigt(1., 0.1, 0.5) for _ in range(20000)])
        assert np.median(x) == pytest.approx(1., abs=0.03)
