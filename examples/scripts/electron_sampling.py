"""
Electron Collision Sampling

Samples collisions of electrons at fixed energies in a gas mixture and
reports the collision statistics, the secondary electron spectrum from
ionisation and the deexcitation (or Penning) products.

Usage:
    python electron_sampling.py [config.yaml] [n_collisions]
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
from tqdm import tqdm
import sys
import time

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from gasmix_mc.core.types import CollisionType, ProductType
from gasmix_mc.transport.medium import GasMedium

DEFAULT_CONFIG = Path(__file__).parent.parent / 'configs' / 'ar_co2_90_10.yaml'


def sample_collisions(gas: GasMedium, energy: float, n_collisions: int) -> dict:
    """
    Sample collisions at one electron energy.

    Parameters:
        gas: Gas medium
        energy: Electron energy [eV]
        n_collisions: Number of collisions to sample

    Returns:
        Dictionary with secondary energies, product energies and timing
    """
    gas.reset_collision_counters()
    secondaries = []
    photons = []
    electrons = []
    direction = np.array([0., 0., 1.])

    t0 = time.time()
    for _ in tqdm(range(n_collisions), desc=f"{energy:g} eV", unit="coll"):
        c = gas.sample_electron_collision(energy, direction)
        if c.type == CollisionType.IONISATION:
            secondaries.append(c.secondaries[0][1])
        for product in gas.get_deexcitation_products():
            if product['type'] == int(ProductType.PHOTON):
                photons.append(product['energy'])
            else:
                electrons.append(product['energy'])
    elapsed = time.time() - t0

    return {
        'secondaries': np.array(secondaries),
        'photons': np.array(photons),
        'electrons': np.array(electrons),
        'time': elapsed,
    }


def print_statistics(gas: GasMedium, energy: float, result: dict, n_collisions: int):
    stats = gas.counters.get_statistics()
    print(f"\n{'='*70}")
    print(f"Electron energy: {energy:g} eV")
    print(f"{'='*70}")
    for name, count in stats['electron'].items():
        if count:
            print(f"  {name.lower():<13s} {count:8d}  ({100. * count / n_collisions:5.2f}%)")
    print(f"  Penning transfers: {stats['penning']}")
    print(f"  Deexcitation photons: {len(result['photons'])}")
    if len(result['secondaries']):
        print(f"  Mean secondary energy: {result['secondaries'].mean():.2f} eV")
    print(f"  Sampling rate: {n_collisions / result['time']:.0f} collisions/s")


def plot_spectra(results: dict, save_path=None):
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    for energy, result in results.items():
        if len(result['secondaries']):
            axes[0].hist(result['secondaries'], bins=60, histtype='step', linewidth=1.5,
                         density=True, label=f'{energy:g} eV')
    axes[0].set_xlabel('Secondary electron energy [eV]', fontsize=12, fontweight='bold')
    axes[0].set_ylabel('Probability density [eV$^{-1}$]', fontsize=12, fontweight='bold')
    axes[0].set_yscale('log')
    axes[0].legend()
    axes[0].grid(True, alpha=0.3, linestyle='--')

    photons = np.concatenate([r['photons'] for r in results.values()])
    if len(photons):
        axes[1].hist(photons, bins=200, histtype='stepfilled', alpha=0.7)
    axes[1].set_xlabel('Photon energy [eV]', fontsize=12, fontweight='bold')
    axes[1].set_ylabel('Counts', fontsize=12, fontweight='bold')
    axes[1].set_title('Deexcitation photons')
    axes[1].grid(True, alpha=0.3, linestyle='--')

    plt.tight_layout()
    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"\nFigure saved: {save_path}")
    return fig


if __name__ == "__main__":
    config = sys.argv[1] if len(sys.argv) > 1 else str(DEFAULT_CONFIG)
    n_collisions = int(sys.argv[2]) if len(sys.argv) > 2 else 20000

    gas = GasMedium.from_config(config, seed=42)
    if not gas.initialise():
        sys.exit(1)
    print(gas.summary())

    results = {}
    for energy in (20., 50., 100.):
        results[energy] = sample_collisions(gas, energy, n_collisions)
        print_statistics(gas, energy, results[energy], n_collisions)

    plot_spectra(results, Path(__file__).parent / 'electron_sampling.png')
    plt.show()
