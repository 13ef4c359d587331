"""
Range proofs over Pedersen commitments:
PK{ (v, r): C = g^v h^r and 0 <= v < 2^8 }
PK{ (v, r): C = g^v h^r and 18 <= v < 65 }
"""

from zkprimer import generate_parameters, commit, prove_range, verify_range
from zkprimer import SeededRandomSource
from zkprimer.primitives.rangeproof import prove_interval, verify_interval

params = generate_parameters(bits=64, rng=SeededRandomSource(b"example-group"))

age = commit(params, 42)

proof = prove_range(params, age, 8)
assert verify_range(params, age.value, proof)

proof = prove_interval(params, age, 18, 65)
assert verify_interval(params, age.value, 18, 65, proof)
