"""
Why nonces must never repeat: two proofs that share a nonce leak the secret key.
"""

from zkprimer import generate_parameters, keygen, prove, SeededRandomSource
from zkprimer.base import Transcript
from zkprimer.primitives.schnorr import challenge, extract_witness

params = generate_parameters(bits=64, rng=SeededRandomSource(b"example-group"))
keypair = keygen(params)

# Replaying the same seed replays the same nonce.
proofs = []
for context in ["first", "second"]:
    rng = SeededRandomSource(b"broken-rng")
    proof = prove(params, keypair.secret, keypair.public, rng=rng, message=context)
    e = challenge(params, keypair.public, proof.commitment, context)
    proofs.append(Transcript(proof.commitment, e, proof.response))

recovered = extract_witness(params, *proofs)
assert recovered == keypair.secret
