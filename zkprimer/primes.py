r"""
Probabilistic primality testing and safe-prime group generation.

A safe prime :math:`p = 2q + 1` makes the quadratic residues modulo :math:`p` a cyclic group
of prime order :math:`q`. Every non-identity residue generates that group, so no small-order
checks are needed when picking generators.

>>> from zkprimer.utils.rand import SeededRandomSource
>>> rng = SeededRandomSource(b"primes")
>>> p, q = generate_safe_prime(24, rng=rng)
>>> p == q * 2 + 1 and q.num_bits() == 24
True
>>> g = find_generator(p, q, rng=rng)
>>> g.mod_pow(q, p) == 1
True
"""

import logging

from petlib.bn import Bn

from zkprimer.consts import DEFAULT_MR_ROUNDS, MAX_SAFE_PRIME_ATTEMPTS, SMALL_PRIMES
from zkprimer.exceptions import ParameterError, ParameterGenerationFailed
from zkprimer.utils.misc import ensure_bn
from zkprimer.utils.rand import get_rng, random_in_range, random_odd_with_bits


logger = logging.getLogger(__name__)


def _has_small_factor(n):
    """True if ``n`` is divisible by a tabulated small prime other than itself."""
    for prime in SMALL_PRIMES:
        if n == prime:
            return False
        if n % Bn(prime) == 0:
            return True
    return False


def is_probably_prime(n, rounds=DEFAULT_MR_ROUNDS, rng=None):
    r"""
    Miller-Rabin primality test.

    A composite passes a single round with probability at most :math:`1/4`, so ``rounds``
    rounds bound the false-positive rate by :math:`4^{-rounds}`. Primes always pass.

    >>> [n for n in range(20) if is_probably_prime(n)]
    [2, 3, 5, 7, 11, 13, 17, 19]
    >>> is_probably_prime(561)  # Carmichael number
    False

    Args:
        n: Candidate integer.
        rounds: Number of random bases to try.
        rng: Source of the random bases.
    """
    n = ensure_bn(n)
    if n < 2:
        return False
    if n < 4:
        return True
    if not n.is_odd():
        return False
    if _has_small_factor(n):
        return False
    if n <= SMALL_PRIMES[-1]:
        return n in SMALL_PRIMES

    # n - 1 = d * 2^s with d odd
    n_minus_one = n - 1
    d = n_minus_one
    s = 0
    while not d.is_odd():
        d = d // 2
        s += 1

    rng = get_rng(rng)
    for _ in range(rounds):
        a = random_in_range(rng, 2, n - 2)
        x = a.mod_pow(d, n)
        if x == 1 or x == n_minus_one:
            continue
        for _ in range(s - 1):
            x = x.mod_mul(x, n)
            if x == n_minus_one:
                break
        else:
            return False
    return True


def generate_safe_prime(
    bits, rng=None, rounds=DEFAULT_MR_ROUNDS, max_attempts=MAX_SAFE_PRIME_ATTEMPTS
):
    """
    Find a safe prime :math:`p = 2q + 1` where :math:`q` is a prime of ``bits`` bits.

    Candidates for :math:`q` are random odd numbers with the top bit set. Candidates where
    either :math:`q` or :math:`2q + 1` has a small factor are discarded before running
    Miller-Rabin.

    Args:
        bits: Bit length of :math:`q`.
        rng: Randomness source.
        rounds: Miller-Rabin rounds for each of :math:`q` and :math:`p`.
        max_attempts: Candidate budget. ``None`` searches until success.

    Returns:
        tuple: :math:`(p, q)` as big numbers.

    Raises:
        ParameterError: If ``bits`` is too small to hold an odd prime.
        ParameterGenerationFailed: If ``max_attempts`` candidates were all rejected.
    """
    if bits < 3:
        raise ParameterError("Need at least 3 bits for q, got {}".format(bits))

    rng = get_rng(rng)
    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        q = random_odd_with_bits(rng, bits)
        p = q * 2 + 1
        if _has_small_factor(q) or _has_small_factor(p):
            continue
        if not is_probably_prime(q, rounds, rng):
            continue
        if is_probably_prime(p, rounds, rng):
            logger.debug(
                "Found %i-bit safe prime after %i candidates", p.num_bits(), attempts
            )
            return p, q

    raise ParameterGenerationFailed(
        "No {}-bit safe prime found in {} attempts".format(bits, max_attempts)
    )


def find_generator(p, q, rng=None):
    r"""
    Pick a random generator of the order-:math:`q` subgroup of :math:`\mathbb{Z}_p^*`.

    Squares a random :math:`h \in [2, p-2]`. The square is a quadratic residue, hence in the
    order-:math:`q` subgroup, and generates it unless it is the identity.

    >>> from zkprimer.utils.rand import SeededRandomSource
    >>> find_generator(23, 11, rng=SeededRandomSource(0)).mod_pow(11, 23)
    1
    """
    p = ensure_bn(p)
    q = ensure_bn(q)
    if p != q * 2 + 1:
        raise ParameterError("p = {} is not 2q + 1 for q = {}".format(p, q))

    rng = get_rng(rng)
    while True:
        h = random_in_range(rng, 2, p - 2)
        g = h.mod_mul(h, p)
        if g == 1:
            continue
        if g.mod_pow(q, p) != 1:
            raise ParameterError("p = {} is not a safe prime".format(p))
        return g

