import pytest

from petlib.bn import Bn
from petlib.pack import encode, decode

from zkprimer.exceptions import InvalidWitness
from zkprimer.primitives.pedersen import (
    Commitment,
    commit,
    commit_with_blinding,
    compute_commitment,
    open_commitment,
    verify_opening,
    combine,
    scale,
    shift,
    identity,
)


def test_commit_and_open(params, rng):
    for v in [0, 1, 42, params.q - 1]:
        c = commit(params, v, rng)
        assert 1 <= c.blinding < params.q
        assert params.is_element(c.value)
        assert open_commitment(params, c)


def test_commitment_formula(toy):
    c = commit_with_blinding(toy, 3, 5)
    # 4^3 * 9^5 mod 23
    assert c.value == (pow(4, 3, 23) * pow(9, 5, 23)) % 23


def test_open_wrong_value(params, rng):
    c = commit(params, 10, rng)
    forged = Commitment(c.value, Bn(11), c.blinding)
    assert not open_commitment(params, forged)


def test_open_wrong_blinding(params, rng):
    c = commit(params, 10, rng)
    forged = Commitment(c.value, c.committed_value, c.blinding.mod_add(1, params.q))
    assert not open_commitment(params, forged)


def test_open_never_raises(params):
    assert not open_commitment(params, None)
    assert not open_commitment(params, Commitment("C", 1, 1))
    assert not open_commitment(params, Commitment(Bn(0), Bn(1), Bn(1)))


def test_verify_opening_rejects_out_of_range(params, rng):
    c = commit(params, 10, rng)
    assert verify_opening(params, c.value, 10, c.blinding)
    assert not verify_opening(params, c.value, 10 + params.q, c.blinding)
    assert not verify_opening(params, c.value, 10, c.blinding + params.q)


def test_hiding_same_value_different_commitments(params, rng):
    assert commit(params, 5, rng).value != commit(params, 5, rng).value


@pytest.mark.parametrize("v", [-1, "1", None])
def test_commit_rejects_bad_values(params, v):
    with pytest.raises(InvalidWitness):
        commit(params, v)


def test_commit_rejects_value_equal_to_order(params):
    with pytest.raises(InvalidWitness):
        commit(params, params.q)


def test_commit_with_blinding_rejects_bad_blinding(params):
    with pytest.raises(InvalidWitness):
        commit_with_blinding(params, 1, params.q)
    with pytest.raises(InvalidWitness):
        commit_with_blinding(params, 1, -1)


def test_zero_blinding_warns(params):
    with pytest.warns(UserWarning):
        c = commit_with_blinding(params, 1, 0)
    assert c.value == params.g


def test_homomorphism(params, rng):
    for _ in range(20):
        v1 = rng.random_below(params.q)
        v2 = rng.random_below(params.q)
        c1 = commit(params, v1, rng)
        c2 = commit(params, v2, rng)
        c3 = combine(params, c1, c2)

        assert c3.value == params.mul(c1.value, c2.value)
        assert c3.committed_value == v1.mod_add(v2, params.q)
        assert c3.blinding == c1.blinding.mod_add(c2.blinding, params.q)
        assert open_commitment(params, c3)
        assert verify_opening(
            params,
            c3.value,
            v1.mod_add(v2, params.q),
            c1.blinding.mod_add(c2.blinding, params.q),
        )


def test_homomorphism_wraps_around_order(toy, rng):
    c1 = commit(toy, 7, rng)
    c2 = commit(toy, 9, rng)
    c3 = combine(toy, c1, c2)
    assert c3.committed_value == 5
    assert open_commitment(toy, c3)


def test_identity_is_neutral(params, rng):
    c = commit(params, 13, rng)
    assert combine(params, identity(params), c) == c


def test_scale(params, rng):
    c = commit(params, 6, rng)
    c4 = scale(params, c, 4)
    assert c4.committed_value == 24
    assert c4.value == params.exp(c.value, 4)
    assert open_commitment(params, c4)


def test_shift(params, rng):
    c = commit(params, 20, rng)
    up = shift(params, c, 5)
    down = shift(params, c, -20)
    assert up.committed_value == 25 and up.blinding == c.blinding
    assert down.committed_value == 0
    assert open_commitment(params, up)
    assert open_commitment(params, down)


def test_public_part(params, rng):
    c = commit(params, 3, rng)
    assert c.public() == c.value
    assert "blinding" not in repr(c)


def test_compute_commitment_matches(params, rng):
    c = commit(params, 99, rng)
    assert compute_commitment(params, 99, c.blinding) == c.value


@pytest.mark.pack_decode
def test_pack_roundtrip(params, rng):
    c = commit(params, 77, rng)
    decoded = decode(encode(c))
    assert decoded.value == c.value
    assert decoded.committed_value is None and decoded.blinding is None


def test_encoding_carries_public_value_only(params, rng):
    c = commit(params, 77, rng)
    assert encode(c) == encode(Commitment(c.value))
    assert not open_commitment(params, Commitment(c.value))


def test_opening_with_plain_ints(params, rng):
    c = commit(params, 77, rng)
    assert verify_opening(params, int(c.value), 77, int(c.blinding))
