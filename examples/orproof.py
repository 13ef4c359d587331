"""
Or-composition of two discrete-logarithm knowledge proofs:
PK{ (x): (y1 = g^x) | (y2 = g^x) }
"""

from zkprimer import generate_parameters, keygen, prove_or, verify_or
from zkprimer import SeededRandomSource

params = generate_parameters(bits=64, rng=SeededRandomSource(b"example-group"))

# We know the key behind y2 only.
stranger = keygen(params)
me = keygen(params)

proof = prove_or(params, me.secret, stranger.public, me.public, known_index=1)
assert verify_or(params, stranger.public, me.public, proof)
