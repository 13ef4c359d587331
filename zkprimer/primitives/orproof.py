r"""
Disjunctive proof of knowledge of one of two discrete logarithms.

.. math::

    PK \{ (x): y_1 = b^x \lor y_2 = b^x \}

where :math:`b` is a public base, :math:`g` by default. The prover knows the witness of one
leg only. It simulates the other leg by picking its challenge and response first and solving
for the commitment. It then runs the real leg with the residual challenge
:math:`e_{real} = e - e_{sim} \bmod q`, where :math:`e = H(a_1, a_2, y_1, y_2)`.

Both legs pass the same algebraic checks, so the proof does not reveal which one was real.

See "Proofs of Partial Knowledge and Simplified Design of Witness Hiding Protocols" by Cramer,
Damgard and Schoenmakers, 1994.

>>> from zkprimer.params import toy_parameters
>>> from zkprimer.primitives.schnorr import keygen
>>> params = toy_parameters()
>>> known, unknown = keygen(params), keygen(params)
>>> proof = prove_or(params, known.secret, known.public, unknown.public)
>>> verify_or(params, known.public, unknown.public, proof)
True
"""

import attr
from petlib.pack import encode, decode, register_coders

from zkprimer.base import build_fiat_shamir_challenge
from zkprimer.consts import OR_PROOF_TAG
from zkprimer.exceptions import InvalidWitness
from zkprimer.utils.misc import ensure_bn, in_range
from zkprimer.utils.rand import get_rng


@attr.s(frozen=True)
class ORProof:
    """
    Two Schnorr transcripts :math:`(a_i, e_i, z_i)` whose challenges sum to the hash.

    Nothing in the structure tells the real leg from the simulated one.
    """

    a1 = attr.ib()
    a2 = attr.ib()
    e1 = attr.ib()
    e2 = attr.ib()
    z1 = attr.ib()
    z2 = attr.ib()


def simulate_leg(params, base, y, z, e):
    r"""
    Solve a leg backwards: :math:`a = b^z \cdot y^{-e}`, so that :math:`b^z = a y^e` holds.
    """
    return params.mul(params.exp(base, z), params.exp(y, -ensure_bn(e)))


def real_leg(params, base, rng=None):
    r"""
    Commit on the real leg: return the nonce :math:`r` and :math:`a = b^r`.
    """
    r = params.random_scalar(rng)
    return r, params.exp(base, r)


def or_challenge(params, base, a1, a2, y1, y2, message=""):
    r"""
    Combined challenge :math:`e = H(tag, p, q, b, a_1, a_2, y_1, y_2, message) \bmod q`.
    """
    return build_fiat_shamir_challenge(
        OR_PROOF_TAG,
        params.q,
        params.p,
        params.q,
        ensure_bn(base),
        ensure_bn(a1),
        ensure_bn(a2),
        ensure_bn(y1),
        ensure_bn(y2),
        message=message,
    )


def prove_or(params, x, y1, y2, known_index=0, rng=None, base=None, message=""):
    """
    Prove knowledge of the discrete logarithm of ``y1`` or of ``y2``.

    Args:
        params: Group parameters.
        x: Witness in :math:`[1, q-1]` for the leg at ``known_index``.
        y1: First public value.
        y2: Second public value. Any subgroup element will do for the simulated leg.
        known_index: 0 if ``x`` opens ``y1``, 1 if it opens ``y2``.
        rng: Randomness source.
        base: Base of both discrete logarithms, :math:`g` by default.
        message: Optional context bound into the challenge.

    Raises:
        InvalidWitness: If ``x`` is out of range or does not open the selected leg.
        ValueError: If ``known_index`` is neither 0 nor 1.
    """
    if known_index not in (0, 1):
        raise ValueError("known_index must be 0 or 1, got {}".format(known_index))
    if base is None:
        base = params.g
    if not in_range(x, 1, params.q - 1):
        raise InvalidWitness("Witness must lie in [1, q-1]")

    rng = get_rng(rng)
    q = params.q
    x = ensure_bn(x)
    ys = [ensure_bn(y1), ensure_bn(y2)]
    real, simulated = known_index, 1 - known_index
    if params.exp(base, x) != ys[real]:
        raise InvalidWitness("Witness does not open leg {}".format(real))

    a = [None, None]
    e = [None, None]
    z = [None, None]

    e[simulated] = params.random_scalar(rng)
    z[simulated] = params.random_scalar(rng)
    a[simulated] = simulate_leg(params, base, ys[simulated], z[simulated], e[simulated])

    r, a[real] = real_leg(params, base, rng)

    challenge = or_challenge(params, base, a[0], a[1], ys[0], ys[1], message)
    e[real] = challenge.mod_sub(e[simulated], q)
    z[real] = r.mod_add(e[real].mod_mul(x, q), q)

    return ORProof(a1=a[0], a2=a[1], e1=e[0], e2=e[1], z1=z[0], z2=z[1])


def verify_or(params, y1, y2, proof, base=None, message=""):
    """
    Verify a disjunctive proof.

    Checks the challenge split :math:`e_1 + e_2 = H(\\ldots)` and both legs' Schnorr
    equations. Never raises.

    Returns:
        bool: True if the prover knew the discrete logarithm of ``y1`` or ``y2``.
    """
    if base is None:
        base = params.g
    try:
        legs = ((proof.a1, proof.e1, proof.z1, y1), (proof.a2, proof.e2, proof.z2, y2))
        for a, e, z, y in legs:
            if not (params.is_element(a) and params.is_element(y)):
                return False
            if not (params.is_scalar(e) and params.is_scalar(z)):
                return False

        challenge = or_challenge(params, base, proof.a1, proof.a2, y1, y2, message)
        if ensure_bn(proof.e1).mod_add(ensure_bn(proof.e2), params.q) != challenge:
            return False

        for a, e, z, y in legs:
            if params.exp(base, z) != params.mul(a, params.exp(y, e)):
                return False
        return True
    except (AttributeError, TypeError, ValueError, ArithmeticError):
        return False


def enc_ORProof(obj):
    return encode([obj.a1, obj.a2, obj.e1, obj.e2, obj.z1, obj.z2])


def dec_ORProof(data):
    return ORProof(*decode(data))


register_coders(ORProof, 23, enc_ORProof, dec_ORProof)
