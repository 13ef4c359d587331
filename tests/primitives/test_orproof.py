import pytest

from petlib.bn import Bn
from petlib.pack import encode, decode

from zkprimer.exceptions import InvalidWitness
from zkprimer.primitives.orproof import (
    ORProof,
    prove_or,
    verify_or,
    simulate_leg,
    real_leg,
    or_challenge,
)
from zkprimer.primitives.schnorr import keygen


@pytest.fixture
def keys(params, rng):
    return keygen(params, rng), keygen(params, rng)


@pytest.mark.parametrize("known_index", [0, 1])
def test_or_proof_completeness(params, keys, rng, known_index):
    y1, y2 = keys[0].public, keys[1].public
    secret = keys[known_index].secret
    proof = prove_or(params, secret, y1, y2, known_index=known_index, rng=rng)
    assert verify_or(params, y1, y2, proof)


def test_or_proof_with_unknown_second_key(params, keys, rng):
    # The prover never sees a witness for y2; any subgroup element works.
    y2 = params.exp(params.h, 123456789)
    proof = prove_or(params, keys[0].secret, keys[0].public, y2, rng=rng)
    assert verify_or(params, keys[0].public, y2, proof)


def test_or_proof_split_invariant(params, keys, rng):
    y1, y2 = keys[0].public, keys[1].public
    proof = prove_or(params, keys[0].secret, y1, y2, rng=rng)
    e = or_challenge(params, params.g, proof.a1, proof.a2, y1, y2)
    assert proof.e1.mod_add(proof.e2, params.q) == e


def test_or_proof_tampered_split_fails(params, keys, rng):
    y1, y2 = keys[0].public, keys[1].public
    proof = prove_or(params, keys[0].secret, y1, y2, rng=rng)
    tampered = ORProof(
        proof.a1,
        proof.a2,
        proof.e1.mod_add(1, params.q),
        proof.e2,
        proof.z1,
        proof.z2,
    )
    assert not verify_or(params, y1, y2, tampered)


def test_or_proof_shifted_challenges_fail(params, keys, rng):
    # Keeping e1 + e2 but moving weight between legs breaks the leg equations.
    y1, y2 = keys[0].public, keys[1].public
    proof = prove_or(params, keys[0].secret, y1, y2, rng=rng)
    q = params.q
    tampered = ORProof(
        proof.a1,
        proof.a2,
        proof.e1.mod_add(1, q),
        proof.e2.mod_sub(1, q),
        proof.z1,
        proof.z2,
    )
    assert not verify_or(params, y1, y2, tampered)


def test_or_proof_tampered_response_fails(params, keys, rng):
    y1, y2 = keys[0].public, keys[1].public
    proof = prove_or(params, keys[0].secret, y1, y2, rng=rng)
    tampered = ORProof(
        proof.a1, proof.a2, proof.e1, proof.e2, proof.z1, proof.z2.mod_add(1, params.q)
    )
    assert not verify_or(params, y1, y2, tampered)


def test_or_proof_swapped_statement_fails(params, keys, rng):
    y1, y2 = keys[0].public, keys[1].public
    proof = prove_or(params, keys[0].secret, y1, y2, rng=rng)
    assert not verify_or(params, y2, y1, proof)


def test_or_proof_message_binding(params, keys, rng):
    y1, y2 = keys[0].public, keys[1].public
    proof = prove_or(params, keys[0].secret, y1, y2, rng=rng, message="ctx")
    assert verify_or(params, y1, y2, proof, message="ctx")
    assert not verify_or(params, y1, y2, proof, message="other")


def test_or_proof_custom_base(params, rng):
    x = params.random_scalar(rng)
    y1 = params.exp(params.h, x)
    y2 = params.exp(params.h, params.random_scalar(rng))
    proof = prove_or(params, x, y1, y2, rng=rng, base=params.h)
    assert verify_or(params, y1, y2, proof, base=params.h)
    assert not verify_or(params, y1, y2, proof)


def test_or_proof_requires_matching_witness(params, keys):
    with pytest.raises(InvalidWitness):
        prove_or(params, keys[1].secret, keys[0].public, keys[1].public, known_index=0)


@pytest.mark.parametrize("x", [0, -3, None])
def test_or_proof_rejects_invalid_witness(params, keys, x):
    with pytest.raises(InvalidWitness):
        prove_or(params, x, keys[0].public, keys[1].public)


def test_or_proof_rejects_bad_index(params, keys):
    with pytest.raises(ValueError):
        prove_or(params, keys[0].secret, keys[0].public, keys[1].public, known_index=2)


def test_cannot_prove_without_any_witness(params, keys, rng):
    """Simulating both legs cannot satisfy the hash split."""
    y1, y2 = keys[0].public, keys[1].public
    e1, z1 = params.random_scalar(rng), params.random_scalar(rng)
    e2, z2 = params.random_scalar(rng), params.random_scalar(rng)
    a1 = simulate_leg(params, params.g, y1, z1, e1)
    a2 = simulate_leg(params, params.g, y2, z2, e2)
    assert not verify_or(params, y1, y2, ORProof(a1, a2, e1, e2, z1, z2))


def test_simulate_leg_satisfies_equation(params, keys, rng):
    y = keys[1].public
    z, e = params.random_scalar(rng), params.random_scalar(rng)
    a = simulate_leg(params, params.g, y, z, e)
    assert params.exp(params.g, z) == params.mul(a, params.exp(y, e))


def test_real_leg(params, rng):
    r, a = real_leg(params, params.g, rng)
    assert 1 <= r < params.q
    assert a == params.exp(params.g, r)


def test_legs_look_alike(params, keys, rng):
    """Both orderings produce proofs with the same shape and value ranges."""
    y1, y2 = keys[0].public, keys[1].public
    left = prove_or(params, keys[0].secret, y1, y2, known_index=0, rng=rng)
    right = prove_or(params, keys[1].secret, y1, y2, known_index=1, rng=rng)
    for proof in (left, right):
        assert params.is_element(proof.a1) and params.is_element(proof.a2)
        for scalar in (proof.e1, proof.e2, proof.z1, proof.z2):
            assert 0 <= scalar < params.q
        assert verify_or(params, y1, y2, proof)


@pytest.mark.parametrize(
    "proof",
    [None, "x", ORProof(None, None, None, None, None, None), ORProof(0, 0, 0, 0, 0, 0)],
)
def test_verify_or_never_raises(params, keys, proof):
    assert not verify_or(params, keys[0].public, keys[1].public, proof)


def test_verify_or_rejects_non_member(params, keys, rng):
    y1 = keys[0].public
    proof = prove_or(params, keys[0].secret, y1, keys[1].public, rng=rng)
    assert not verify_or(params, y1, params.p - 1, proof)


@pytest.mark.pack_decode
def test_pack_roundtrip(params, keys, rng):
    proof = prove_or(params, keys[0].secret, keys[0].public, keys[1].public, rng=rng)
    decoded = decode(encode(proof))
    assert decoded == proof
    assert verify_or(params, keys[0].public, keys[1].public, decoded)
