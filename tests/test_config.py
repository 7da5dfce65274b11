"""Tests for the configuration snapshot and its YAML loader."""

import pytest

from gasmix_mc.core.config import MixtureConfig
from gasmix_mc.core.exceptions import ConfigurationError
from gasmix_mc.core.types import SplittingFunction
from gasmix_mc.transport.medium import GasMedium


class TestMixtureConfig:

    def test_defaults(self):
        cfg = MixtureConfig()
        assert cfg.species == ('Ar',)
        assert cfg.temperature == pytest.approx(293.15)
        assert cfg.pressure == pytest.approx(760.)
        assert cfg.max_electron_energy == pytest.approx(40.)
        assert cfg.max_photon_energy == pytest.approx(20.)
        assert cfg.anisotropic and cfg.auto_adjust and cfg.radiation_trapping
        assert not cfg.deexcitation and not cfg.penning
        assert cfg.splitting == SplittingFunction.OPAL_BEATY

    def test_normalise_composition(self):
        pairs = MixtureConfig.normalise_composition({'Ar': 70., 'CO2': 30.})
        assert pairs == (('Ar', pytest.approx(0.7)), ('CO2', pytest.approx(0.3)))

    @pytest.mark.parametrize("composition", [{}, {'Ar': 0.}, {'Ar': 1., 'CO2': -1.}])
    def test_bad_composition(self, composition):
        with pytest.raises(ConfigurationError):
            MixtureConfig.normalise_composition(composition)

    @pytest.mark.parametrize("kwargs", [
        dict(temperature=0.),
        dict(pressure=-1.),
        dict(max_electron_energy=0.),
        dict(max_photon_energy=1.e-30),
        dict(penning_r=1.5),
        dict(penning_species=(('CO2', -0.1, 0.),)),
        dict(excitation_scaling=(('Ar', 0.),)),
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ConfigurationError):
            MixtureConfig(**kwargs)

    def test_with_changes_is_a_new_snapshot(self):
        cfg = MixtureConfig()
        other = cfg.with_changes(temperature=300.)
        assert cfg.temperature == pytest.approx(293.15)
        assert other.temperature == pytest.approx(300.)
        assert cfg.with_changes(temperature=293.15) == cfg

    def test_from_dict(self):
        cfg = MixtureConfig.from_dict({
            'composition': {'Ar': 93., 'CO2': 7.},
            'splitting': 'green-sawada',
            'penning_species': {'CO2': {'r': 0.4, 'lambda': 1.e-30}},
            'excitation_scaling': {'Ar': 1.2},
            'pressure': 1000,
        })
        assert cfg.species == ('Ar', 'CO2')
        assert cfg.fractions[0] == pytest.approx(0.93)
        assert cfg.splitting == SplittingFunction.GREEN_SAWADA
        assert cfg.penning_species == (('CO2', 0.4, 0.),)
        assert cfg.excitation_scaling == (('Ar', 1.2),)
        assert isinstance(cfg.pressure, float)

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError, match="Unknown"):
            MixtureConfig.from_dict({'temprature': 300.})

    def test_from_dict_rejects_unknown_splitting(self):
        with pytest.raises(ConfigurationError):
            MixtureConfig.from_dict({'splitting': 'binary-encounter'})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "mixture.yaml"
        path.write_text(
            "composition:\n"
            "  Ar: 90.\n"
            "  CO2: 10.\n"
            "temperature: 300.\n"
            "max_electron_energy: 100.\n"
            "deexcitation: true\n"
        )
        cfg = MixtureConfig.from_yaml(path)
        assert cfg.species == ('Ar', 'CO2')
        assert cfg.temperature == pytest.approx(300.)
        assert cfg.deexcitation

    def test_from_yaml_requires_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- Ar\n- CO2\n")
        with pytest.raises(ConfigurationError):
            MixtureConfig.from_yaml(path)

    def test_medium_from_yaml(self, tmp_path, database, optical):
        path = tmp_path / "mixture.yaml"
        path.write_text("composition: {Ar: 1.}\nmax_electron_energy: 60.\n")
        gas = GasMedium.from_config(str(path), provider=database, optical=optical)
        assert gas.config.max_electron_energy == pytest.approx(60.)
        assert gas.initialise()
        assert gas.tables.e_final == pytest.approx(60.)


class TestMediumSetters:

    def test_unknown_species(self, database, optical):
        gas = GasMedium(database, optical)
        with pytest.raises(ConfigurationError):
            gas.set_composition({'Unobtainium': 1.})

    def test_alias_is_resolved(self, database, optical):
        gas = GasMedium(database, optical)
        gas.set_composition({'argon': 80., 'isobutane': 20.})
        assert gas.config.species == ('Ar', 'iC4H10')

    def test_duplicate_species(self, database, optical):
        gas = GasMedium(database, optical)
        with pytest.raises(ConfigurationError):
            gas.set_composition([('Ar', 1.), ('argon', 1.)])

    def test_invalid_parameters(self, database, optical):
        gas = GasMedium(database, optical)
        with pytest.raises(ConfigurationError):
            gas.set_temperature(-5.)
        with pytest.raises(ConfigurationError):
            gas.set_pressure(0.)
        with pytest.raises(ConfigurationError):
            gas.set_max_electron_energy(0.)
        with pytest.raises(ConfigurationError):
            gas.enable_penning_transfer(1.2)

    def test_per_species_setting_requires_species_in_mixture(self, database, optical):
        gas = GasMedium(database, optical)
        with pytest.raises(ConfigurationError, match="not part"):
            gas.enable_penning_transfer(0.5, gas='CO2')
        with pytest.raises(ConfigurationError):
            gas.set_excitation_scaling_factor('CO2', 2.)
        with pytest.raises(ConfigurationError):
            gas.set_excitation_scaling_factor('Ar', 0.)

    def test_version_only_changes_on_new_values(self, database, optical):
        gas = GasMedium(database, optical)
        v0 = gas.version
        gas.set_temperature(293.15)
        gas.enable_anisotropic_scattering()
        assert gas.version == v0
        gas.set_temperature(300.)
        assert gas.version == v0 + 1

    def test_composition_resets_per_species_settings(self, database, optical):
        gas = GasMedium(database, optical)
        gas.set_composition({'Ar': 90., 'CO2': 10.})
        gas.enable_penning_transfer(0.3, gas='CO2')
        gas.set_excitation_scaling_factor('Ar', 1.5)
        gas.set_composition({'Ar': 80., 'CO2': 20.})
        assert gas.config.penning_species == ()
        assert gas.config.excitation_scaling == ()

    def test_penning_and_deexcitation_are_exclusive(self, database, optical):
        gas = GasMedium(database, optical)
        gas.enable_penning_transfer(0.4, 1.e-4)
        assert gas.config.penning and not gas.config.deexcitation
        gas.enable_deexcitation()
        assert gas.config.deexcitation and not gas.config.penning
        gas.set_composition({'Ar': 90., 'CO2': 10.})
        gas.enable_penning_transfer(0.4, gas='CO2')
        assert gas.config.penning and not gas.config.deexcitation

    def test_snapshot_rejects_penning_with_deexcitation(self, tmp_path, database, optical):
        with pytest.raises(ConfigurationError, match="mutually exclusive"):
            MixtureConfig(deexcitation=True, penning=True, penning_r=0.4)
        with pytest.raises(ConfigurationError, match="mutually exclusive"):
            MixtureConfig.from_dict({'deexcitation': True, 'penning': True})
        path = tmp_path / "mixture.yaml"
        path.write_text("composition: {Ar: 1.}\ndeexcitation: true\npenning: true\n")
        with pytest.raises(ConfigurationError, match="mutually exclusive"):
            GasMedium.from_config(str(path), provider=database, optical=optical)

    def test_disable_penning_for_last_species(self, database, optical):
        gas = GasMedium(database, optical)
        gas.set_composition({'Ar': 90., 'CO2': 10.})
        gas.enable_penning_transfer(0.4, gas='CO2')
        gas.disable_penning_transfer('CO2')
        assert not gas.config.penning
        assert gas.config.penning_species == ()

    def test_penning_lambda_below_small_is_zero(self, database, optical):
        gas = GasMedium(database, optical)
        gas.enable_penning_transfer(0.5, 1.e-25)
        assert gas.config.penning_lambda == 0.

    def test_splitting_setters(self, database, optical):
        gas = GasMedium(database, optical)
        gas.set_splitting_function_green_sawada()
        assert gas.config.splitting == SplittingFunction.GREEN_SAWADA
        gas.set_splitting_function_flat()
        assert gas.config.splitting == SplittingFunction.FLAT
        gas.set_splitting_function_opal_beaty()
        assert gas.config.splitting == SplittingFunction.OPAL_BEATY
