r"""
Pedersen commitments.

.. math::

    C = g^v h^r \bmod p

Hiding is perfect given a uniform :math:`r`. Binding holds as long as nobody knows
:math:`\log_g h`, which :py:func:`zkprimer.params.generate_parameters` ensures by drawing
:math:`h` independently.

Commitments are additively homomorphic: multiplying two commitments gives a commitment to the
sum of the values under the sum of the blindings.

>>> from zkprimer.params import toy_parameters
>>> params = toy_parameters()
>>> c1, c2 = commit(params, 3), commit(params, 5)
>>> c3 = combine(params, c1, c2)
>>> c3.committed_value
8
>>> open_commitment(params, c3)
True
"""

import warnings

import attr
from petlib.bn import Bn
from petlib.pack import encode, decode, register_coders

from zkprimer.exceptions import InvalidWitness
from zkprimer.utils.misc import ensure_bn, in_range


@attr.s(frozen=True)
class Commitment:
    """
    A Pedersen commitment together with its opening.

    Only :py:attr:`value` is meant to leave the committer until the commitment is opened; use
    :py:meth:`public` to get it. The opening is hidden from ``repr``, and the
    :py:mod:`petlib.pack` coder only carries :py:attr:`value`, so a decoded commitment has no
    opening.
    """

    value = attr.ib()
    committed_value = attr.ib(default=None, repr=False)
    blinding = attr.ib(default=None, repr=False)

    def public(self):
        """The group element :math:`C` to transmit or store."""
        return self.value


def _check_value(params, v):
    if not in_range(v, 0, params.q - 1):
        raise InvalidWitness("Committed value must lie in [0, q-1]")
    return ensure_bn(v)


def compute_commitment(params, v, r):
    r"""Group element :math:`g^v h^r \bmod p`, without range checks."""
    return params.mul(params.exp(params.g, v), params.exp(params.h, r))


def commit_with_blinding(params, v, r):
    """
    Deterministic commitment with a caller-supplied blinding.

    A zero blinding is accepted, as aggregated blindings can cancel out, but the resulting
    commitment hides nothing.

    Raises:
        InvalidWitness: If ``v`` or ``r`` is not in :math:`[0, q-1]`.
    """
    v = _check_value(params, v)
    if not in_range(r, 0, params.q - 1):
        raise InvalidWitness("Blinding must lie in [0, q-1]")
    r = ensure_bn(r)
    if r == 0:
        warnings.warn("Commitment with zero blinding does not hide the value")
    return Commitment(
        value=compute_commitment(params, v, r), committed_value=v, blinding=r
    )


def commit(params, v, rng=None):
    r"""
    Commit to :math:`v \in [0, q-1]` with a fresh blinding :math:`r \in [1, q-1]`.

    Args:
        params: Group parameters.
        v: Value to commit to.
        rng: Randomness source for the blinding.
    """
    v = _check_value(params, v)
    r = params.random_scalar(rng)
    return Commitment(
        value=compute_commitment(params, v, r), committed_value=v, blinding=r
    )


def verify_opening(params, value, v, r):
    """
    Check that :math:`(v, r)` opens the public commitment ``value``.

    Returns False on malformed input.
    """
    if not params.is_element(value):
        return False
    if not (params.is_scalar(v) and params.is_scalar(r)):
        return False
    return compute_commitment(params, v, r) == ensure_bn(value)


def open_commitment(params, commitment):
    """
    Reveal step: recompute :math:`g^v h^r` and compare with the stored value.
    """
    try:
        return verify_opening(
            params,
            commitment.value,
            commitment.committed_value,
            commitment.blinding,
        )
    except (AttributeError, TypeError, ValueError, ArithmeticError):
        return False


def identity(params):
    """Commitment to zero with zero blinding, the neutral element of :py:func:`combine`."""
    return Commitment(value=Bn(1), committed_value=Bn(0), blinding=Bn(0))


def combine(params, c1, c2):
    """
    Homomorphic addition.

    The public values multiply; values and blindings add modulo :math:`q`.
    """
    q = params.q
    v1, v2 = ensure_bn(c1.committed_value), ensure_bn(c2.committed_value)
    r1, r2 = ensure_bn(c1.blinding), ensure_bn(c2.blinding)
    return Commitment(
        value=params.mul(c1.value, c2.value),
        committed_value=v1.mod_add(v2, q),
        blinding=r1.mod_add(r2, q),
    )


def scale(params, commitment, k):
    """
    Raise a commitment to a public power :math:`k`, i.e., commit to :math:`k v` under
    :math:`k r`.
    """
    q = params.q
    k = ensure_bn(k) % q
    return Commitment(
        value=params.exp(commitment.value, k),
        committed_value=ensure_bn(commitment.committed_value).mod_mul(k, q),
        blinding=ensure_bn(commitment.blinding).mod_mul(k, q),
    )


def shift(params, commitment, delta):
    """
    Add a public constant :math:`\\delta` to the committed value without touching the blinding.
    """
    q = params.q
    delta = ensure_bn(delta)
    return Commitment(
        value=shift_public(params, commitment.value, delta),
        committed_value=ensure_bn(commitment.committed_value).mod_add(delta, q),
        blinding=commitment.blinding,
    )


def shift_public(params, value, delta):
    r"""Public part of :py:func:`shift`: :math:`C \cdot g^{\delta}`."""
    return params.mul(value, params.exp(params.g, delta))


def enc_Commitment(obj):
    return encode(obj.value)


def dec_Commitment(data):
    return Commitment(value=decode(data))


register_coders(Commitment, 22, enc_Commitment, dec_Commitment)
