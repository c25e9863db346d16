"""
Owned pseudorandom source for the impairment generators.

Every path model receives its own source so that runs can be reproduced
from a seed and two directions of a duplex path never share state.
"""

import random
import typing as tp

from loguru import logger


class RandomSource:
    """
    Uniform [0, 1) draws backed by a private ``random.Random``.

    Args:
        seed: Seed for reproducible runs (None seeds from system entropy)
        generator: Existing generator to wrap instead of creating one
    """

    def __init__(
        self,
        seed: tp.Optional[int] = None,
        generator: tp.Optional[random.Random] = None,
    ):
        self.seed = seed
        self._generator = generator if generator is not None else random.Random(seed)

    def uniform(self) -> float:
        """Return the next draw in [0, 1)."""
        return self._generator.random()

    def ensure_entropy(self, samples: int = 10) -> bool:
        """
        Reseed the source if its first draws are degenerate.

        Some generators yield nothing but zeroes until they are seeded. If
        every one of ``samples`` draws is exactly zero the source is reseeded
        from system entropy.

        Args:
            samples: Number of draws to inspect

        Returns:
            True if the source had to be reseeded
        """
        for _ in range(samples):
            if self.uniform() != 0.0:
                return False

        logger.warning(
            f"Random source produced {samples} zero draws, reseeding from system entropy"
        )
        self.seed = None
        self._generator.seed()
        return True

    def spawn(self) -> "RandomSource":
        """Derive an independent child source seeded from this one."""
        return RandomSource(seed=self._generator.getrandbits(64))

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed})"
