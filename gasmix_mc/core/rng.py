"""
Shared random number stream.

Every draw made by the samplers and the deexcitation cascade goes through
one RandomStream so that a fixed seed reproduces the full draw sequence.
"""

import numpy as np
from typing import Optional


class RandomStream:
    """Thin wrapper around a numpy Generator with the draws used in transport."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def seed(self, seed: int):
        """Restart the stream from a new seed."""
        self._rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        """Uniform in [0, 1)."""
        return float(self._rng.random())

    def uniform_pos(self) -> float:
        """Uniform in (0, 1]."""
        return 1. - float(self._rng.random())

    def gaussian(self, mu: float, sigma: float) -> float:
        return float(self._rng.normal(mu, sigma))

    def voigt(self, mu: float, sigma: float, gamma: float) -> float:
        """
        Sample a Voigt distribution.

        Parameters:
            mu: Centre
            sigma: Standard deviation of the Gaussian component
            gamma: Half width at half maximum of the Lorentzian component

        Returns:
            Random variate (Lorentzian offset smeared by the Gaussian)
        """
        if gamma <= 0.:
            return self.gaussian(mu, sigma)
        x = gamma * np.tan(np.pi * (self.uniform() - 0.5))
        return self.gaussian(mu + x, sigma)
