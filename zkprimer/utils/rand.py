"""
Randomness sources.

Every randomized operation in the library takes an explicit ``rng`` argument, so tests can
replay a proof from a fixed seed while production code keeps drawing from a CSPRNG. A source
only needs one method, ``random_below(bound)``, returning a :py:class:`petlib.bn.Bn` uniformly
distributed in :math:`[0, bound)`.

>>> rng = SeededRandomSource(b"doc")
>>> x = rng.random_below(100)
>>> 0 <= x < 100
True
>>> x == SeededRandomSource(b"doc").random_below(100)
True
"""

from hashlib import sha512

from petlib.bn import Bn

from zkprimer.utils.misc import ensure_bn, num_bytes


class SystemRandomSource:
    """
    Cryptographically secure randomness from the OpenSSL generator behind petlib.

    Thread safety is that of OpenSSL's RNG.
    """

    def random_below(self, bound):
        bound = ensure_bn(bound)
        if bound < 1:
            raise ValueError("Bound must be positive, got {}".format(bound))
        return bound.random()

    def __repr__(self):
        return "SystemRandomSource()"


class SeededRandomSource:
    """
    Deterministic stream seeded by a byte string.

    Blocks are ``SHA-512(seed || counter)``; values are drawn by rejection sampling, so the
    output is uniform in the requested interval.

    .. WARNING ::

        Two proofs built from identical seeds reuse their nonces, which leaks the secret key.
        Use only for tests and reproducible examples.

    Args:
        seed: Seed as bytes, str, or int.
    """

    def __init__(self, seed):
        if isinstance(seed, int):
            seed = b"%i" % seed
        elif isinstance(seed, str):
            seed = seed.encode()
        self._seed = bytes(seed)
        self._counter = 0
        self._buffer = b""

    def _read(self, length):
        while len(self._buffer) < length:
            block = sha512(self._seed + self._counter.to_bytes(8, "big")).digest()
            self._counter += 1
            self._buffer += block
        out, self._buffer = self._buffer[:length], self._buffer[length:]
        return out

    def random_below(self, bound):
        bound = ensure_bn(bound)
        if bound < 1:
            raise ValueError("Bound must be positive, got {}".format(bound))
        num_bits = bound.num_bits()
        mask = Bn(2).pow(num_bits)
        while True:
            candidate = Bn.from_binary(self._read(num_bytes(bound))) % mask
            if candidate < bound:
                return candidate

    def __repr__(self):
        return "SeededRandomSource({!r})".format(self._seed)


DEFAULT_RANDOM_SOURCE = SystemRandomSource()


def get_rng(rng=None):
    """Return ``rng``, or the system source if none is given."""
    if rng is None:
        return DEFAULT_RANDOM_SOURCE
    return rng


def random_in_range(rng, lo, hi):
    """
    Draw uniformly from the closed interval :math:`[lo, hi]`.

    >>> rng = SeededRandomSource(1)
    >>> all(3 <= random_in_range(rng, 3, 5) <= 5 for _ in range(20))
    True
    """
    lo = ensure_bn(lo)
    hi = ensure_bn(hi)
    if hi < lo:
        raise ValueError("Empty interval [{}, {}]".format(lo, hi))
    return lo + get_rng(rng).random_below(hi - lo + 1)


def random_odd_with_bits(rng, bits):
    """
    Draw an odd number with exactly ``bits`` bits (top bit set).

    >>> x = random_odd_with_bits(SeededRandomSource(2), 16)
    >>> x.num_bits(), x.is_odd()
    (16, True)
    """
    if bits < 2:
        raise ValueError("Need at least two bits, got {}".format(bits))
    half = Bn(2).pow(bits - 1)
    candidate = half + get_rng(rng).random_below(half)
    if not candidate.is_odd():
        candidate += 1
    return candidate
