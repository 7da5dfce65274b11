"""
Reference cross-section and photoabsorption providers.

Cross sections are evaluated from simple analytic shapes whose parameters
are tabulated in data/gases.yaml; photoabsorption cross sections and
ionisation yields are interpolated linearly in the tabulated optical data.
The numbers are representative of the real gases but are not evaluated
data sets; they exist so that mixtures can be built and sampled without
an external database.
"""

import logging
import numpy as np
import yaml
from pathlib import Path
from typing import Optional, Tuple, Union

from gasmix_mc.core.constants import ATOMIC_MASS_UNIT_EV, ELECTRON_MASS
from gasmix_mc.core.exceptions import ConfigurationError
from gasmix_mc.physics.providers import CrossSectionData, CrossSectionRequest

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent.parent / 'data' / 'gases.yaml'

# Optical data is tabulated in Mb
MEGABARN = 1.e-18


def _load_data_file(path: Optional[Path]) -> dict:
    if path is None:
        path = DEFAULT_DATA_FILE
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Gas data file not found: {path}")
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    logger.debug("Loaded gas data from %s", path)
    return data


def _threshold_shape(energies: np.ndarray, threshold: float, sigma0: float) -> np.ndarray:
    """sigma0 * ln(x) / x above threshold, zero below."""
    x = energies / threshold
    out = np.zeros_like(energies)
    above = x > 1.
    out[above] = sigma0 * np.log(x[above]) / x[above]
    return out


def _superelastic_shape(energies: np.ndarray, threshold: float, sigma0: float) -> np.ndarray:
    return sigma0 / np.sqrt(1. + energies / abs(threshold))


def _resonance_shape(energies: np.ndarray, threshold: float, sigma0: float,
                     centre: float, width: float) -> np.ndarray:
    out = sigma0 * np.exp(-((energies - centre) / width)**2)
    out[energies <= threshold] = 0.
    return out


def _angular_parameter(energies: np.ndarray, model: int, forward: float,
                       e_fwd: float) -> np.ndarray:
    if model == 1:
        return 0.5 + forward * energies / (energies + e_fwd)
    if model == 2:
        return forward * energies / (energies + e_fwd)
    return np.full_like(energies, 0.5)


class ModelGasDatabase:
    """
    Analytic cross-section provider.

    Usage:
        db = ModelGasDatabase()
        name = db.resolve('argon')          # -> 'Ar'
        data = db.query_cross_sections(CrossSectionRequest(name, energies))
    """

    def __init__(self, data_file: Optional[Path] = None):
        data = _load_data_file(data_file)
        self._species = data.get('species', {})
        self._aliases = {}
        for name, entry in self._species.items():
            self._aliases[name.lower()] = name
            for alias in entry.get('aliases', []):
                self._aliases[str(alias).lower()] = name

    @property
    def species(self) -> Tuple[str, ...]:
        return tuple(self._species.keys())

    def resolve(self, name: str) -> Optional[str]:
        if name in self._species:
            return name
        return self._aliases.get(name.strip().lower())

    def query_cross_sections(self, request: CrossSectionRequest) -> CrossSectionData:
        if request.species not in self._species:
            raise ConfigurationError(f"Unknown species '{request.species}'")
        entry = self._species[request.species]
        e = np.asarray(request.energies, dtype=np.float64)
        n = len(e)

        # Elastic
        el = entry['elastic']
        x = e / el['e0']
        elastic = el.get('floor', 0.) + el['sigma0'] * x / (1. + x * x)
        elastic_model = int(el.get('model', 0))
        if request.anisotropic:
            elastic_par = _angular_parameter(e, elastic_model, el.get('forward', 0.),
                                             el.get('e_fwd', 1.))
        else:
            elastic_par = np.full(n, 0.5)

        # Ionisation
        ion = entry.get('ionisation', [])
        ionisation = np.zeros((len(ion), n))
        for j, chan in enumerate(ion):
            ionisation[j] = _threshold_shape(e, chan['threshold'], chan['sigma0'])
        ion_thresholds = np.array([c['threshold'] for c in ion], dtype=np.float64)
        opal_beaty = np.array([c['w'] for c in ion], dtype=np.float64)

        # Attachment (always at least one row)
        att = entry.get('attachment', [])
        attachment = np.zeros((max(len(att), 1), n))
        for j, chan in enumerate(att):
            attachment[j] = _resonance_shape(e, 0., chan['sigma0'], chan['centre'], chan['width'])
        att_desc = tuple(c['description'] for c in att) or (" ATTACHMENT",)

        # Inelastic
        inel = entry.get('inelastic', [])
        inelastic = np.zeros((len(inel), n))
        thresholds = np.zeros(len(inel))
        descriptions = []
        for j, chan in enumerate(inel):
            if isinstance(chan, dict):
                desc, threshold, sigma0 = chan['description'], chan['threshold'], chan['sigma0']
                if chan.get('kind') == 'resonance':
                    inelastic[j] = _resonance_shape(e, threshold, sigma0,
                                                    chan['centre'], chan['width'])
                elif threshold < 0.:
                    inelastic[j] = _superelastic_shape(e, threshold, sigma0)
                else:
                    inelastic[j] = _threshold_shape(e, threshold, sigma0)
            else:
                desc, threshold, sigma0 = chan
                if threshold < 0.:
                    inelastic[j] = _superelastic_shape(e, threshold, sigma0)
                else:
                    inelastic[j] = _threshold_shape(e, threshold, sigma0)
            thresholds[j] = threshold
            descriptions.append(desc)

        mass_ev = entry['mass'] * ATOMIC_MASS_UNIT_EV
        return CrossSectionData(
            species=request.species,
            mass_ratio=2. * ELECTRON_MASS / mass_ev,
            elastic=elastic,
            elastic_par=elastic_par,
            elastic_model=elastic_model,
            ionisation=ionisation,
            ionisation_par=np.full((len(ion), n), 0.5),
            ionisation_thresholds=ion_thresholds,
            ionisation_model=0,
            opal_beaty=opal_beaty,
            attachment=attachment,
            inelastic=inelastic,
            inelastic_par=np.full((len(inel), n), 0.5),
            inelastic_thresholds=thresholds,
            inelastic_models=np.zeros(len(inel), dtype=np.int64),
            elastic_description=" ELASTIC " + request.species,
            ionisation_descriptions=tuple(c['description'] for c in ion),
            attachment_descriptions=att_desc,
            inelastic_descriptions=tuple(descriptions),
        )


class ModelOpticalData:
    """Tabulated photoabsorption cross sections and ionisation yields."""

    def __init__(self, data_file: Optional[Path] = None):
        data = _load_data_file(data_file)
        self._tables = {}
        for name, rows in data.get('optical', {}).items():
            table = np.asarray(rows, dtype=np.float64)
            self._tables[name] = (table[:, 0], table[:, 1] * MEGABARN, table[:, 2])

    def is_available(self, name: str) -> bool:
        return name in self._tables

    def photoabsorption(self, name: str, energy: Union[float, np.ndarray]):
        if name not in self._tables:
            raise ConfigurationError(f"No photoabsorption data for '{name}'")
        energies, cs, eta = self._tables[name]
        pacs = np.interp(energy, energies, cs)
        yield_ = np.clip(np.interp(energy, energies, eta), 0., 1.)
        if np.ndim(energy) == 0:
            return float(pacs), float(yield_)
        return pacs, yield_
