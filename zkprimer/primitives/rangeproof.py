r"""
Range proof: ZK proof that a committed value lies within a range.

.. math::

    PK \{ (r, v): C = g^v h^r \land 0 \leq v < 2^n \}

The value is decomposed into bits :math:`b_0, \ldots, b_{n-1}`, least significant first. Each
bit gets its own Pedersen commitment :math:`C_i = g^{b_i} h^{r_i}` and a disjunctive proof
that :math:`C_i` commits to 0 or to 1:

.. math::

    PK \{ (r_i): C_i = h^{r_i} \lor C_i / g = h^{r_i} \}

The bit commitments recombine homomorphically, :math:`\prod_i C_i^{2^i} = g^v h^{r_{total}}`
with :math:`r_{total} = \sum_i 2^i r_i`. The proof reveals the offset
:math:`r_{total} - r`, so the verifier can check the recombination against :math:`C`.
The offset is uniform because :math:`r` is, so it leaks nothing about :math:`v`.

Reconstruction alone shows only that *some* decomposition matches :math:`C`. The per-bit
disjunctive proofs are what make the decomposition binary and the proof sound.

Intervals :math:`[lo, hi)` combine two power-of-two proofs, as in "`Efficient Protocols for
Set Membership and Range Proofs`_" by Camenisch et al., 2008.

.. _`Efficient Protocols for Set Membership and Range Proofs`:
    https://infoscience.epfl.ch/record/128718/files/CCS08.pdf

>>> from zkprimer.params import toy_parameters
>>> from zkprimer.primitives.pedersen import commit
>>> params = toy_parameters()
>>> com = commit(params, 5)
>>> proof = prove_range(params, com, 3)
>>> verify_range(params, com.value, proof)
True
"""

import warnings

import attr
from petlib.bn import Bn
from petlib.pack import encode, decode, register_coders

from zkprimer.consts import RANGE_PROOF_TAG
from zkprimer.exceptions import InvalidWitness, ParameterError
from zkprimer.primitives.orproof import prove_or, verify_or
from zkprimer.primitives.pedersen import commit, combine, scale, identity, shift
from zkprimer.primitives.pedersen import shift_public
from zkprimer.utils.misc import ensure_bn, in_range, sum_bn_array
from zkprimer.utils.rand import get_rng


def decompose_into_n_bits(value, n):
    """
    Array of bits, least significant bit first.

    >>> decompose_into_n_bits(6, 4)
    [0, 1, 1, 0]

    Raises:
        InvalidWitness: If the value is negative or needs more than ``n`` bits.
    """
    value = ensure_bn(value)
    if value < 0:
        raise InvalidWitness("Can't represent negative values")

    base = [1 if value.is_bit_set(b) else 0 for b in range(value.num_bits())]

    extra_bits = n - len(base)
    if extra_bits < 0:
        raise InvalidWitness("Not enough bits to represent value")

    return base + [0] * extra_bits


def aggregate_blinding(params, blindings):
    r"""
    :math:`\sum_i 2^i r_i \bmod q`.
    """
    q = params.q
    terms = [ensure_bn(r).mod_mul(Bn(2).pow(i), q) for i, r in enumerate(blindings)]
    return sum_bn_array(terms, q)


def reconstruct(params, bit_commitments):
    r"""
    Recombine bit commitments into :math:`\prod_i C_i^{2^i}`.

    Returns a :py:class:`Commitment` that opens to the recombined value under the aggregated
    blinding.
    """
    combined = identity(params)
    power = Bn(1)
    for c in bit_commitments:
        combined = combine(params, combined, scale(params, c, power))
        power = power * 2
    return combined


def reconstruct_public(params, values):
    r"""Public part of :py:func:`reconstruct`: :math:`\prod_i C_i^{2^i}`."""
    combined = Bn(1)
    power = Bn(1)
    for c in values:
        combined = params.mul(combined, params.exp(c, power))
        power = power * 2
    return combined


def commit_bits(params, value, n, rng=None):
    """
    Commit to each bit of ``value`` with an independent blinding.
    """
    rng = get_rng(rng)
    return [commit(params, b, rng) for b in decompose_into_n_bits(value, n)]


def _check_num_bits(params, n):
    # Exponents live modulo q; beyond that the recombination wraps around.
    if n < 1 or Bn(2).pow(n) > params.q:
        raise ParameterError(
            "Cannot prove {}-bit ranges in a group of order {}".format(n, params.q)
        )


def _bit_context(com_value, index, message):
    return "{}|{}|{}|{}".format(RANGE_PROOF_TAG, ensure_bn(com_value).hex(), index, message)


@attr.s(frozen=True)
class BitProof:
    """
    Proof that a bit commitment :math:`C_i` opens to 0 or 1.

    Leg 1 is :math:`C_i = h^{r}`, leg 2 is :math:`C_i / g = h^{r}`.
    """

    commitment = attr.ib()
    proof = attr.ib()


def prove_bit(params, commitment, rng=None, message=""):
    """
    Disjunctive proof that ``commitment`` commits to a bit.

    Raises:
        InvalidWitness: If the committed value is not 0 or 1.
    """
    bit = commitment.committed_value
    if bit not in (0, 1):
        raise InvalidWitness("Bit commitment must open to 0 or 1")
    c = commitment.value
    proof = prove_or(
        params,
        commitment.blinding,
        c,
        params.div(c, params.g),
        known_index=int(bit),
        rng=rng,
        base=params.h,
        message=message,
    )
    return BitProof(commitment=c, proof=proof)


def verify_bit(params, bit_proof, message=""):
    """Check a :py:class:`BitProof`. Never raises."""
    try:
        c = bit_proof.commitment
        if not params.is_element(c):
            return False
        return verify_or(
            params,
            c,
            params.div(c, params.g),
            bit_proof.proof,
            base=params.h,
            message=message,
        )
    except (AttributeError, TypeError, ValueError, ArithmeticError):
        return False


@attr.s(frozen=True)
class RangeProof:
    """
    Power-of-two range proof.

    Args:
        num_bits: :math:`n`, the proven range is :math:`[0, 2^n)`.
        bit_proofs: One :py:class:`BitProof` per bit, least significant first.
        blinding_offset: :math:`r_{total} - r \\bmod q`.
    """

    num_bits = attr.ib()
    bit_proofs = attr.ib(converter=tuple)
    blinding_offset = attr.ib()

    @property
    def bit_commitments(self):
        return tuple(bp.commitment for bp in self.bit_proofs)


def prove_range(params, commitment, num_bits, rng=None, message=""):
    """
    Prove that ``commitment`` hides a value in :math:`[0, 2^n)`.

    Args:
        params: Group parameters.
        commitment (:py:class:`Commitment`): Commitment with its opening.
        num_bits: :math:`n`. Must satisfy :math:`2^n \\leq q`.
        rng: Randomness source.
        message: Optional context bound into every bit proof.

    Raises:
        ParameterError: If the group is too small for ``num_bits``.
        InvalidWitness: If the committed value is out of range.
    """
    _check_num_bits(params, num_bits)
    value = ensure_bn(commitment.committed_value)
    if value.num_bits() > num_bits:
        warnings.warn("Secret has more than {} bits".format(num_bits))

    rng = get_rng(rng)
    bits = commit_bits(params, value, num_bits, rng)
    offset = aggregate_blinding(params, [c.blinding for c in bits]).mod_sub(
        commitment.blinding, params.q
    )

    bit_proofs = [
        prove_bit(params, c, rng, _bit_context(commitment.value, i, message))
        for i, c in enumerate(bits)
    ]
    return RangeProof(num_bits=num_bits, bit_proofs=bit_proofs, blinding_offset=offset)


def verify_range(params, com, proof, message=""):
    r"""
    Verify a power-of-two range proof against the public commitment ``com``.

    Checks every bit proof, then :math:`\prod_i C_i^{2^i} = C \cdot h^{offset}`. Never raises.
    """
    try:
        n = proof.num_bits
        if isinstance(n, bool) or not isinstance(n, int):
            return False
        if n < 1 or Bn(2).pow(n) > params.q:
            return False
        if len(proof.bit_proofs) != n:
            return False
        if not (params.is_element(com) and params.is_scalar(proof.blinding_offset)):
            return False

        for i, bit_proof in enumerate(proof.bit_proofs):
            if not verify_bit(params, bit_proof, _bit_context(com, i, message)):
                return False

        combined = reconstruct_public(params, proof.bit_commitments)
        expected = params.mul(com, params.exp(params.h, proof.blinding_offset))
        return combined == expected
    except (AttributeError, TypeError, ValueError, ArithmeticError):
        return False


@attr.s(frozen=True)
class IntervalProof:
    """
    Proof that a committed value lies in :math:`[lo, hi)`.

    Holds two power-of-two proofs, for :math:`v - lo` and :math:`v - lo + 2^n - (hi - lo)`.
    """

    lower = attr.ib()
    upper = attr.ib()


def _interval_shape(params, lo, hi):
    lo = ensure_bn(lo)
    hi = ensure_bn(hi)
    if hi <= lo:
        raise ValueError("Empty interval [{}, {})".format(lo, hi))
    num_bits = max(1, (hi - lo - 1).num_bits())
    offset = Bn(2).pow(num_bits) - (hi - lo)
    # The upper proof covers v - lo + offset < 2^(n+1), which must not wrap modulo q.
    if Bn(2).pow(num_bits + 1) > params.q:
        raise ParameterError(
            "Cannot prove intervals of width {} in a group of order {}".format(
                hi - lo, params.q
            )
        )
    return lo, hi, num_bits, offset


def prove_interval(params, commitment, lo, hi, rng=None, message=""):
    """
    Prove that ``commitment`` hides a value in :math:`[lo, hi)`.

    The group must satisfy :math:`2^{n+1} \\leq q` where :math:`n` is the bit length of
    :math:`hi - lo - 1`.

    Raises:
        ParameterError: If the group is too small for the interval.
        InvalidWitness: If the committed value is outside of the interval.
    """
    lo, hi, num_bits, offset = _interval_shape(params, lo, hi)
    value = ensure_bn(commitment.committed_value)
    if not in_range(value, lo, hi - 1):
        raise InvalidWitness("Secret outside of given range [{}, {})".format(lo, hi))

    rng = get_rng(rng)
    shifted_lower = shift(params, commitment, -lo)
    shifted_upper = shift(params, shifted_lower, offset)
    return IntervalProof(
        lower=prove_range(params, shifted_lower, num_bits, rng, message),
        upper=prove_range(params, shifted_upper, num_bits, rng, message),
    )


def verify_interval(params, com, lo, hi, proof, message=""):
    """Verify an :py:class:`IntervalProof` against the public commitment. Never raises."""
    try:
        lo, hi, num_bits, offset = _interval_shape(params, lo, hi)
        if proof.lower.num_bits != num_bits or proof.upper.num_bits != num_bits:
            return False
        if not params.is_element(com):
            return False
        com_lower = shift_public(params, com, -lo)
        com_upper = shift_public(params, com_lower, offset)
        return verify_range(params, com_lower, proof.lower, message) and verify_range(
            params, com_upper, proof.upper, message
        )
    except (AttributeError, TypeError, ValueError, ArithmeticError):
        return False


def enc_BitProof(obj):
    return encode([obj.commitment, obj.proof])


def dec_BitProof(data):
    return BitProof(*decode(data))


def enc_RangeProof(obj):
    return encode([obj.num_bits, list(obj.bit_proofs), obj.blinding_offset])


def dec_RangeProof(data):
    return RangeProof(*decode(data))


def enc_IntervalProof(obj):
    return encode([obj.lower, obj.upper])


def dec_IntervalProof(data):
    return IntervalProof(*decode(data))


register_coders(BitProof, 24, enc_BitProof, dec_BitProof)
register_coders(RangeProof, 25, enc_RangeProof, dec_RangeProof)
register_coders(IntervalProof, 26, enc_IntervalProof, dec_IntervalProof)
