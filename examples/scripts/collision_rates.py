"""
Collision Rates - Ar/CO2 Example

Plots the electron collision rate of a gas mixture, split by collision
category, together with the null-collision rate, and the photon
absorption rate around the argon resonance lines.

This example shows:
    - Building a mixture from a YAML configuration
    - Per-level rate queries
    - Discrete line absorption with radiation trapping

Usage:
    python collision_rates.py [config.yaml]
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from gasmix_mc.core.types import CollisionType
from gasmix_mc.transport.medium import GasMedium

DEFAULT_CONFIG = Path(__file__).parent.parent / 'configs' / 'ar_co2_90_10.yaml'


def rates_by_category(gas: GasMedium, energies: np.ndarray) -> dict:
    """
    Collision rate per category on an energy grid.

    Parameters:
        gas: Initialised gas medium
        energies: Electron energies [eV]

    Returns:
        Dictionary CollisionType -> rate array [ns^-1]
    """
    levels = [gas.get_level(i) for i in range(gas.n_levels)]
    rates = {category: np.zeros(len(energies)) for category in CollisionType}
    for k, energy in enumerate(energies):
        for i, level in enumerate(levels):
            rates[level.category][k] += gas.get_electron_collision_rate(energy, i)
    return {c: r for c, r in rates.items() if np.any(r > 0.)}


def plot_electron_rates(gas: GasMedium, save_path=None):
    e_max = gas.config.max_electron_energy
    energies = np.linspace(0.01, e_max * 0.999, 400)
    rates = rates_by_category(gas, energies)
    total = np.array([gas.get_electron_collision_rate(e) for e in energies])

    plt.figure(figsize=(10, 6))
    plt.plot(energies, total, 'k-', linewidth=2.5, label='Total')
    for category, rate in rates.items():
        plt.plot(energies, rate, linewidth=1.5, label=category.name.capitalize())
    plt.axhline(gas.get_electron_null_collision_rate(), color='r', linestyle='--',
                linewidth=1.5, alpha=0.7, label='Null-collision rate')

    plt.xlabel('Electron energy [eV]', fontsize=14, fontweight='bold')
    plt.ylabel('Collision rate [ns$^{-1}$]', fontsize=14, fontweight='bold')
    plt.title(repr(gas), fontsize=12)
    plt.yscale('log')
    plt.ylim(bottom=1.e-4)
    plt.grid(True, alpha=0.3, linestyle='--')
    plt.legend(fontsize=11)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved: {save_path}")
    return plt.gcf()


def plot_photon_rates(gas: GasMedium, save_path=None):
    tables = gas.tables
    if tables.photon is None:
        print("Photon absorption table not available")
        return None

    plt.figure(figsize=(10, 6))
    energies = np.linspace(11.4, 12.0, 3000)
    rates = np.array([gas.get_photon_collision_rate(e) for e in energies])
    plt.plot(energies, np.maximum(rates, 1.e-10), 'b-', linewidth=1.5)
    for k in tables.photon.line_channel:
        chan = tables.channels[k]
        if energies[0] < chan.energy < energies[-1]:
            plt.axvline(chan.energy, color='g', linestyle=':', alpha=0.7)
            plt.text(chan.energy, 1., chan.label, rotation=90, fontsize=9)

    plt.xlabel('Photon energy [eV]', fontsize=14, fontweight='bold')
    plt.ylabel('Absorption rate [ns$^{-1}$]', fontsize=14, fontweight='bold')
    plt.title('Resonance line absorption', fontsize=14)
    plt.yscale('log')
    plt.grid(True, alpha=0.3, linestyle='--')
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved: {save_path}")
    return plt.gcf()


if __name__ == "__main__":
    config = sys.argv[1] if len(sys.argv) > 1 else str(DEFAULT_CONFIG)
    gas = GasMedium.from_config(config)
    if not gas.initialise():
        sys.exit(1)

    print(f"\n{'='*70}")
    print(gas.summary())
    print(f"{'='*70}\n")

    out_dir = Path(__file__).parent
    plot_electron_rates(gas, out_dir / 'electron_rates.png')
    plot_photon_rates(gas, out_dir / 'photon_rates.png')
    plt.show()
