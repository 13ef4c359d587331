"""
Library-wide constants.
"""

# Miller-Rabin rounds. Each round errs with probability at most 1/4 on composites.
DEFAULT_MR_ROUNDS = 20

# Bit length of the subgroup order q used by generate_parameters.
DEFAULT_GROUP_BITS = 1024

# Upper bound on candidates drawn by the safe-prime search. None disables the cap.
MAX_SAFE_PRIME_ATTEMPTS = 2000000

# Domain-separation tags for the Fiat-Shamir challenges.
SCHNORR_TAG = "zkprimer/schnorr/v1"
OR_PROOF_TAG = "zkprimer/or-proof/v1"
RANGE_PROOF_TAG = "zkprimer/range-proof/v1"


def _small_primes(limit):
    sieve = [True] * limit
    sieve[0] = sieve[1] = False
    for i in range(2, int(limit ** 0.5) + 1):
        if sieve[i]:
            for j in range(i * i, limit, i):
                sieve[j] = False
    return tuple(i for i, is_prime in enumerate(sieve) if is_prime)


# Used for trial division before Miller-Rabin.
SMALL_PRIMES = _small_primes(1000)

# Toy safe-prime group (p = 2q + 1). Only for illustration and tests.
TOY_P = 23
TOY_Q = 11
TOY_G = 4
TOY_H = 9
