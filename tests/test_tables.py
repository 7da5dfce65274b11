"""Tests for the table builder and the compiled energy grids."""

import logging

import numpy as np
import pytest
from dataclasses import replace

from gasmix_mc.core.config import MixtureConfig
from gasmix_mc.core.constants import (
    ELECTRON_MASS,
    ENERGY_HIGH,
    N_ENERGY_STEPS,
    N_ENERGY_STEPS_LOG,
)
from gasmix_mc.core.exceptions import ConfigurationError, RangeExceeded
from gasmix_mc.core.types import CollisionType, SplittingFunction
from gasmix_mc.physics.providers import CrossSectionRequest
from gasmix_mc.transport.medium import GasMedium
from gasmix_mc.transport.tables import (
    MixtureTableBuilder,
    accumulate_rates,
    classify_inelastic,
    relativistic_factor,
)

from conftest import level_index


class ModifiedProvider:
    """Wraps a provider and post-processes its responses."""

    def __init__(self, base, modify):
        self.base = base
        self.modify = modify

    def resolve(self, name):
        return self.base.resolve(name)

    def query_cross_sections(self, request):
        return self.modify(self.base.query_cross_sections(request))


class TestAccumulateRates:

    def test_normalised_cumulative(self):
        rates = np.array([[1., 2., 1.], [0., 0., 0.], [0., 3., 0.]])
        cumulative, total, n_clamped = accumulate_rates(rates)
        assert total == pytest.approx([4., 0., 3.])
        assert cumulative[0] == pytest.approx([0.25, 0.75, 1.])
        assert cumulative[1] == pytest.approx([0., 0., 0.])
        assert cumulative[2] == pytest.approx([0., 1., 1.])
        assert n_clamped == 0

    def test_negative_rates_clamped(self):
        cumulative, total, n_clamped = accumulate_rates(np.array([[1., -1., 1.]]))
        assert n_clamped == 1
        assert total[0] == pytest.approx(2.)
        assert cumulative[0] == pytest.approx([0.5, 0.5, 1.])


class TestArgonTables:

    def test_levels(self, argon):
        tables = argon.tables
        # Elastic, Ar+ (Ar++ lies above 40 eV), attachment placeholder, 44 excitations
        assert tables.n_levels == 47
        categories = [lvl.category for lvl in tables.levels]
        assert categories[:3] == [CollisionType.ELASTIC, CollisionType.IONISATION,
                                  CollisionType.ATTACHMENT]
        assert all(c == CollisionType.EXCITATION for c in categories[3:])
        assert tables.levels[3].description.strip() == "EXC 1S5"
        assert tables.levels[-1].description.strip() == "EXC HIGH"
        assert tables.min_ion_potential == pytest.approx(15.7596)

    def test_energy_loss_is_recoil_corrected(self, argon):
        tables = argon.tables
        lvl = tables.levels[1]
        assert lvl.energy_loss == pytest.approx(lvl.threshold / tables.recoil[0])
        assert lvl.w_opal_beaty == pytest.approx(10.)

    def test_grid_shape(self, argon):
        grid = argon.tables.grid
        assert grid.cumulative.shape == (N_ENERGY_STEPS, 47)
        assert grid.e_step == pytest.approx(40. / N_ENERGY_STEPS)
        assert not grid.has_log_grid

    def test_cumulative_invariants(self, argon):
        grid = argon.tables.grid
        assert np.all(np.diff(grid.cumulative, axis=1) >= -1e-12)
        assert np.all(grid.cumulative >= 0.)
        positive = grid.total > 0.
        assert np.all(positive)
        assert grid.cumulative[:, -1] == pytest.approx(np.ones(N_ENERGY_STEPS))

    def test_excitation_closed_below_threshold(self, argon):
        k = level_index(argon, " EXC 1S5    ")
        assert argon.get_electron_collision_rate(5., k) == 0.
        assert argon.get_electron_collision_rate(20., k) > 0.

    def test_level_rates_sum_to_total(self, argon):
        total = argon.get_electron_collision_rate(25.)
        parts = [argon.get_electron_collision_rate(25., k) for k in range(argon.n_levels)]
        assert sum(parts) == pytest.approx(total, rel=1e-9)

    def test_null_rate_envelope(self, argon):
        null_rate = argon.get_electron_null_collision_rate()
        for energy in np.linspace(0.01, 39.99, 200):
            assert argon.get_electron_collision_rate(energy) <= null_rate * (1. + 1e-12)

    def test_level_out_of_range(self, argon):
        with pytest.raises(IndexError):
            argon.get_electron_collision_rate(10., 47)
        with pytest.raises(IndexError):
            argon.get_level(-1)

    def test_non_positive_energy_returns_first_bin(self, argon, caplog):
        with caplog.at_level(logging.WARNING):
            rate = argon.get_electron_collision_rate(-1.)
        assert rate == pytest.approx(argon.tables.grid.total[0])
        assert "greater than zero" in caplog.text

    def test_strict_locate(self, argon):
        with pytest.raises(RangeExceeded):
            argon.tables.grid.locate(41., strict=True)
        assert argon.tables.grid.locate(41.) == (False, N_ENERGY_STEPS - 1)


class TestLogGrid:

    @pytest.fixture
    def tables(self, database, optical):
        config = MixtureConfig(max_electron_energy=2.e4)
        return MixtureTableBuilder(database, optical).build(config, version=1)

    def test_layout(self, tables):
        grid = tables.grid
        assert grid.has_log_grid
        assert grid.e_step == pytest.approx(ENERGY_HIGH / N_ENERGY_STEPS)
        assert grid.r_log == pytest.approx(2.**(1. / N_ENERGY_STEPS_LOG))
        assert grid.cumulative_log.shape == (N_ENERGY_STEPS_LOG, tables.n_levels)
        # Ar++ is included when the range covers its threshold
        assert sum(1 for lvl in tables.levels if lvl.category == CollisionType.IONISATION) == 2

    def test_continuity_at_boundary(self, tables):
        grid = tables.grid
        below = grid.total_rate(ENERGY_HIGH)
        above = grid.total_rate(ENERGY_HIGH * (1. + 1.e-7))
        assert above == pytest.approx(below, rel=1e-4)

    def test_log_bin_index(self, tables):
        grid = tables.grid
        assert grid.locate(1.5e4) == (True, int(np.log(1.5) / grid.ln_step))
        assert grid.locate(2.e4) == (True, N_ENERGY_STEPS_LOG - 1)

    def test_interpolation_hits_bin_edges(self, tables):
        grid = tables.grid
        i = 50
        edge = ENERGY_HIGH * grid.r_log**(i + 1)
        assert grid.total_rate(edge * (1. - 1.e-9)) == pytest.approx(
            np.exp(grid.log_total[i]), rel=1e-6)

    def test_null_rate_covers_log_grid(self, tables):
        for energy in np.geomspace(1.e4, 1.e6, 80):
            assert tables.grid.total_rate(energy) <= tables.null_rate * (1. + 1e-12)

    def test_rate_clamped_above_range(self, tables):
        grid = tables.grid
        last = np.exp(grid.log_total[-1])
        assert grid.total_rate(2.e4) == pytest.approx(last, rel=1e-9)
        assert grid.total_rate(4.e4) == pytest.approx(last, rel=1e-12)
        assert grid.total_rate(1.e6) == pytest.approx(last, rel=1e-12)

    def test_medium_rate_clamped_above_range(self, database, optical):
        gas = GasMedium(database, optical)
        gas.set_max_electron_energy(2.e4)
        gas.disable_energy_range_adjustment()
        assert gas.initialise()
        last = np.exp(gas.tables.grid.log_total[-1])
        assert gas.get_electron_collision_rate(1.e6) == pytest.approx(last, rel=1e-12)
        assert gas.tables.e_final == pytest.approx(2.e4)

    def test_relativistic_factor_gives_velocity(self):
        energies = np.array([2.e3, 1.5e4, 1.e6])
        re = energies / ELECTRON_MASS
        beta = np.sqrt(re * (2. + re)) / (1. + re)
        expected = beta / np.sqrt(2. * re)
        assert relativistic_factor(energies) == pytest.approx(expected, rel=1e-12)
        assert relativistic_factor(np.array([500.]))[0] == 1.


class TestBuilder:

    def test_unknown_species(self, database, optical):
        config = MixtureConfig(composition=(('Unobtainium', 1.),))
        with pytest.raises(ConfigurationError, match="not available"):
            MixtureTableBuilder(database, optical).build(config)

    def test_version_and_config_are_recorded(self, database, optical):
        config = MixtureConfig(temperature=300.)
        tables = MixtureTableBuilder(database, optical).build(config, version=7)
        assert tables.version == 7
        assert tables.config is config

    def test_negative_rates_are_clamped_with_warning(self, database, optical, caplog):
        def negate_low_energy(data):
            elastic = data.elastic.copy()
            elastic[:10] = -elastic[:10]
            return replace(data, elastic=elastic)

        builder = MixtureTableBuilder(ModifiedProvider(database, negate_low_energy), optical)
        with caplog.at_level(logging.WARNING):
            tables = builder.build(MixtureConfig())
        assert "negative collision rates" in caplog.text
        assert tables.grid.cumulative[0, 0] == 0.
        assert np.all(tables.grid.total >= 0.)

    def test_negative_inelastic_cross_section_warning(self, database, optical, caplog):
        def negate_inelastic(data):
            return replace(data, inelastic=-data.inelastic)

        builder = MixtureTableBuilder(ModifiedProvider(database, negate_inelastic), optical)
        with caplog.at_level(logging.WARNING):
            tables = builder.build(MixtureConfig())
        assert "Negative inelastic cross-section" in caplog.text
        assert tables.grid.level_fraction(20., 10) == 0.

    def test_level_cap(self, database, optical):
        def many_levels(data):
            n = data.n_energies
            return replace(
                data,
                inelastic=np.zeros((600, n)),
                inelastic_par=np.full((600, n), 0.5),
                inelastic_thresholds=np.full(600, 1.),
                inelastic_models=np.zeros(600, dtype=np.int64),
                inelastic_descriptions=(" EXC X      ",) * 600,
            )

        builder = MixtureTableBuilder(ModifiedProvider(database, many_levels), optical)
        with pytest.raises(ConfigurationError, match="Max. number of levels"):
            builder.build(MixtureConfig())

    def test_isotropic_scattering_ignores_models(self, database, optical):
        config = MixtureConfig(anisotropic=False)
        tables = MixtureTableBuilder(database, optical).build(config)
        assert all(lvl.model == 0 for lvl in tables.levels)
        assert np.all(tables.grid.cut == 1.)
        assert np.all(tables.grid.par == 0.5)

    def test_anisotropic_elastic_model(self, database, optical):
        # par = 0.5 + 0.6 E / (E + 20) exceeds 1 above 100 eV, where a cut is applied
        tables = MixtureTableBuilder(database, optical).build(
            MixtureConfig(max_electron_energy=200.))
        assert tables.levels[0].model == 1
        assert tables.grid.cut[-1, 0] < 1.
        assert tables.grid.cut[0, 0] == 1.
        assert tables.grid.par[0, 0] == pytest.approx(0.5, abs=1e-3)

    def test_excitation_scaling(self, database, optical):
        plain = GasMedium(database, optical)
        scaled = GasMedium(database, optical)
        scaled.set_excitation_scaling_factor('Ar', 2.)
        k = level_index(plain, " EXC 1S2    ")
        assert scaled.get_electron_collision_rate(20., k) == pytest.approx(
            2. * plain.get_electron_collision_rate(20., k), rel=1e-9)
        # Elastic is not scaled
        assert scaled.get_electron_collision_rate(20., 0) == pytest.approx(
            plain.get_electron_collision_rate(20., 0), rel=1e-9)

    def test_penning_parameters(self, database, optical):
        config = MixtureConfig(composition=(('Ar', 0.9), ('CO2', 0.1)), penning=True,
                               penning_r=0.2, penning_lambda=0.,
                               penning_species=(('CO2', 0.5, 1.e-4),))
        tables = MixtureTableBuilder(database, optical).build(config)
        gas = np.array([lvl.gas for lvl in tables.levels])
        assert tables.penning_r[gas == 0] == pytest.approx(0.2)
        assert tables.penning_r[gas == 1] == pytest.approx(0.5)
        assert tables.penning_lambda[gas == 1] == pytest.approx(1.e-4)
        assert tables.levels[-1].penning_r == pytest.approx(0.5)

    def test_green_sawada_parameters(self, database, optical, caplog):
        config = MixtureConfig(composition=(('Ar', 0.9), ('CF4', 0.1)),
                               splitting=SplittingFunction.GREEN_SAWADA)
        with caplog.at_level(logging.WARNING):
            tables = MixtureTableBuilder(database, optical).build(config)
        assert "Fit parameters for CF4 not available" in caplog.text
        assert list(tables.has_green_sawada) == [True, False]
        gs, gb, ts, ta, tb = tables.green_sawada[0]
        assert (gs, gb, ts, ta) == pytest.approx((6.92, 7.85, 6.87, 1000.))
        assert tb == pytest.approx(2. * 15.7596)

    def test_no_deexcitation_channels_by_default(self, argon):
        assert argon.tables.channels == ()
        assert not argon.tables.deexcitation
        assert np.all(argon.tables.level_channel == -1)


class TestClassifyInelastic:

    def test_nitrogen(self, database):
        data = database.query_cross_sections(CrossSectionRequest('N2', np.array([1., 10.])))
        categories = [classify_inelastic(data, j) for j in range(data.n_inelastic)]
        assert categories[0] == CollisionType.SUPERELASTIC
        assert categories[1] == CollisionType.INELASTIC
        assert categories[3:] == [CollisionType.EXCITATION] * 4

    def test_explicit_category_wins(self, database):
        data = database.query_cross_sections(CrossSectionRequest('N2', np.array([1., 10.])))
        tags = [None] * data.n_inelastic
        tags[1] = "excitation"
        tags[3] = "INELASTIC"
        data = replace(data, inelastic_categories=tuple(tags))
        assert classify_inelastic(data, 1) == CollisionType.EXCITATION
        assert classify_inelastic(data, 3) == CollisionType.INELASTIC
        assert classify_inelastic(data, 0) == CollisionType.SUPERELASTIC

    def test_carbon_dioxide(self, database):
        data = database.query_cross_sections(CrossSectionRequest('CO2', np.array([1.])))
        descriptions = [d.strip() for d in data.inelastic_descriptions]
        j = descriptions.index("EXC 10.5")
        assert classify_inelastic(data, j) == CollisionType.EXCITATION
        assert classify_inelastic(data, descriptions.index("VIB V1")) == CollisionType.INELASTIC
