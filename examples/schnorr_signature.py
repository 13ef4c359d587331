"""
Non-interactive Schnorr proof (Fiat-Shamir), bound to a message:
PK{ (x): y = g^x mod p }
"""

from zkprimer import generate_parameters, keygen, prove, verify, SeededRandomSource
from zkprimer.primitives.schnorr import SchnorrProof

params = generate_parameters(bits=64, rng=SeededRandomSource(b"example-group"))
keypair = keygen(params)

proof = prove(params, keypair.secret, keypair.public, message="login:alice")
assert verify(params, keypair.public, proof, message="login:alice")

# The proof does not transfer to another context.
assert not verify(params, keypair.public, proof, message="login:bob")

# The fixed-width wire format preserves the proof.
wire = proof.to_bytes(params)
assert SchnorrProof.from_bytes(params, wire) == proof
