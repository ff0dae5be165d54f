"""
Wraith — Smooth Noise
Lattice Perlin noise with cosine interpolation and octave summing.

Works on plain floats or numpy arrays (broadcast), so a whole flow field
can be sampled in one call instead of one Python call per cell.
"""

import numpy as np

# Lattice layout: a 4096-entry random table indexed by x + (y << 4) + (z << 8)
PERLIN_SIZE = 4095
YWRAPB = 4
YWRAP = 1 << YWRAPB
ZWRAPB = 8
ZWRAP = 1 << ZWRAPB


def _fade(t):
    return 0.5 * (1.0 - np.cos(t * np.pi))


class PerlinNoise:
    """Seeded 3D noise returning values in [0, 1).

    Args:
        seed: Seed for the lattice table (None = nondeterministic).
        octaves: Number of summed octaves, each at double frequency.
        falloff: Amplitude multiplier per octave. Must be in (0, 0.5] so the
            summed amplitude stays below 1.
    """

    def __init__(self, seed=None, octaves: int = 4, falloff: float = 0.5):
        if octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")
        if not 0.0 < falloff <= 0.5:
            raise ValueError(f"falloff must be in (0, 0.5], got {falloff}")
        self.octaves = int(octaves)
        self.falloff = float(falloff)
        rng = np.random.RandomState(seed)
        self._table = rng.random_sample(PERLIN_SIZE + 1)

    def noise(self, x, y=0.0, z=0.0):
        scalar = np.isscalar(x) and np.isscalar(y) and np.isscalar(z)
        x, y, z = np.broadcast_arrays(
            np.abs(np.atleast_1d(np.asarray(x, dtype=np.float64))),
            np.abs(np.atleast_1d(np.asarray(y, dtype=np.float64))),
            np.abs(np.atleast_1d(np.asarray(z, dtype=np.float64))),
        )

        xi = np.floor(x).astype(np.int64)
        yi = np.floor(y).astype(np.int64)
        zi = np.floor(z).astype(np.int64)
        xf = x - xi
        yf = y - yi
        zf = z - zi

        table = self._table
        result = np.zeros(x.shape, dtype=np.float64)
        ampl = 0.5

        for _ in range(self.octaves):
            of = xi + (yi << YWRAPB) + (zi << ZWRAPB)
            rxf = _fade(xf)
            ryf = _fade(yf)

            n1 = table[of & PERLIN_SIZE]
            n1 = n1 + rxf * (table[(of + 1) & PERLIN_SIZE] - n1)
            n2 = table[(of + YWRAP) & PERLIN_SIZE]
            n2 = n2 + rxf * (table[(of + YWRAP + 1) & PERLIN_SIZE] - n2)
            n1 = n1 + ryf * (n2 - n1)

            of = of + ZWRAP
            n2 = table[of & PERLIN_SIZE]
            n2 = n2 + rxf * (table[(of + 1) & PERLIN_SIZE] - n2)
            n3 = table[(of + YWRAP) & PERLIN_SIZE]
            n3 = n3 + rxf * (table[(of + YWRAP + 1) & PERLIN_SIZE] - n3)
            n2 = n2 + ryf * (n3 - n2)

            n1 = n1 + _fade(zf) * (n2 - n1)
            result += n1 * ampl
            ampl *= self.falloff

            # Next octave: double frequency, carry whole part into the lattice index
            xi = xi << 1
            yi = yi << 1
            zi = zi << 1
            xf = xf * 2
            yf = yf * 2
            zf = zf * 2
            for frac, whole in ((xf, xi), (yf, yi), (zf, zi)):
                carry = frac >= 1.0
                whole += carry
                frac -= carry

        if scalar:
            return float(result.flat[0])
        return result

    __call__ = noise
