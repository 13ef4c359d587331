"""
Interactive Schnorr identification:
PK{ (x): y = g^x mod p }
"""

from zkprimer import generate_parameters, keygen, SeededRandomSource
from zkprimer.primitives.schnorr import SchnorrProver, SchnorrVerifier

# A small group keeps the example fast. Real deployments want DEFAULT_GROUP_BITS.
params = generate_parameters(bits=64, rng=SeededRandomSource(b"example-group"))

# The prover's key pair. The public key goes to the verifier.
keypair = keygen(params)

prover = SchnorrProver(params, keypair)
verifier = SchnorrVerifier(params, keypair.public)

commitment = prover.commit()
challenge = verifier.send_challenge(commitment)
response = prover.compute_response(challenge)
assert verifier.verify(response)
