r"""
Schnorr proof of knowledge of a discrete logarithm.

.. math::

    PK \{ (x): y = g^x \bmod p \}

The interactive protocol has three moves. The prover sends :math:`a = g^r`, the verifier
answers with a random :math:`e`, and the prover returns :math:`z = r + e x \bmod q`. The
verifier accepts iff :math:`g^z = a \cdot y^e \bmod p`. The non-interactive variant replaces
:math:`e` by a hash of the statement and the commitment (Fiat-Shamir).

.. WARNING ::

    The nonce :math:`r` must never be reused. Two proofs sharing a nonce but answering
    different challenges reveal :math:`x`; see :py:func:`extract_witness`.

>>> from zkprimer.params import toy_parameters
>>> params = toy_parameters()
>>> keypair = keygen(params)
>>> proof = prove(params, keypair.secret, keypair.public)
>>> verify(params, keypair.public, proof)
True
"""

import attr
from petlib.pack import encode, decode, register_coders

from zkprimer.base import Prover, Verifier, Transcript, build_fiat_shamir_challenge
from zkprimer.consts import SCHNORR_TAG
from zkprimer.exceptions import InvalidWitness, DeserializationError
from zkprimer.utils.misc import ensure_bn, mod_inverse, in_range
from zkprimer.utils.misc import int_to_fixed_bytes, fixed_bytes_to_int
from zkprimer.utils.rand import get_rng


@attr.s(frozen=True)
class KeyPair:
    """
    Secret exponent and matching public key :math:`y = g^x`.

    The secret is excluded from ``repr`` so it does not end up in logs.
    """

    secret = attr.ib(repr=False)
    public = attr.ib()


@attr.s(frozen=True)
class SchnorrProof:
    """
    Non-interactive Schnorr proof :math:`(a, z)`.

    The challenge is not stored; the verifier recomputes it from the hash.
    """

    commitment = attr.ib()
    response = attr.ib()

    def to_bytes(self, params):
        """Fixed-width encoding: :math:`a` on the byte width of :math:`p`, then :math:`z`."""
        return int_to_fixed_bytes(
            self.commitment, params.element_width
        ) + int_to_fixed_bytes(self.response, params.scalar_width)

    @classmethod
    def from_bytes(cls, params, data):
        width_a, width_z = params.element_width, params.scalar_width
        if len(data) != width_a + width_z:
            raise DeserializationError(
                "Expected {} bytes, got {}".format(width_a + width_z, len(data))
            )
        return cls(
            commitment=fixed_bytes_to_int(data[:width_a]),
            response=fixed_bytes_to_int(data[width_a:]),
        )


def _check_secret(params, x):
    if not in_range(x, 1, params.q - 1):
        raise InvalidWitness("Secret must lie in [1, q-1]")
    return ensure_bn(x)


def keygen(params, rng=None):
    r"""
    Draw :math:`x \in [1, q-1]` and compute :math:`y = g^x`.
    """
    x = params.random_scalar(rng)
    return KeyPair(secret=x, public=params.exp(params.g, x))


def challenge(params, y, a, message=""):
    r"""
    Fiat-Shamir challenge :math:`e = H(tag, p, q, g, y, a, message) \bmod q`.
    """
    return build_fiat_shamir_challenge(
        SCHNORR_TAG,
        params.q,
        params.p,
        params.q,
        params.g,
        ensure_bn(y),
        ensure_bn(a),
        message=message,
    )


def check_transcript(params, y, a, e, z):
    r"""
    Check the verification equation :math:`g^z = a \cdot y^e \bmod p`.

    Returns False for any out-of-range input instead of raising.
    """
    if not (params.is_element(y) and params.is_element(a)):
        return False
    if not (params.is_scalar(e) and params.is_scalar(z)):
        return False
    return params.exp(params.g, z) == params.mul(a, params.exp(y, e))


class SchnorrProver(Prover):
    """
    Interactive Schnorr prover.

    Args:
        params: Group parameters.
        keypair (:py:class:`KeyPair`): Prover's key pair.
        rng: Randomness source for the nonce.
    """

    def __init__(self, params, keypair, rng=None):
        super().__init__(params)
        self.secret = _check_secret(params, keypair.secret)
        self.public = keypair.public
        self.rng = get_rng(rng)

    def internal_commit(self):
        r = self.params.random_scalar(self.rng)
        return r, self.params.exp(self.params.g, r)

    def internal_response(self, nonce, challenge):
        q = self.params.q
        return nonce.mod_add(ensure_bn(challenge).mod_mul(self.secret, q), q)


class SchnorrVerifier(Verifier):
    """
    Interactive Schnorr verifier. Challenges are uniform in :math:`[1, q-1]`.

    Args:
        params: Group parameters.
        public: Public key :math:`y`.
        rng: Randomness source for the challenge.
    """

    def __init__(self, params, public, rng=None):
        super().__init__(params)
        self.public = public
        self.rng = get_rng(rng)

    def draw_challenge(self):
        return self.params.random_scalar(self.rng)

    def check(self, commitment, challenge, response):
        return check_transcript(self.params, self.public, commitment, challenge, response)


def prove(params, x, y, rng=None, message=""):
    """
    Non-interactive proof of knowledge of :math:`x = \\log_g y`.

    Args:
        params: Group parameters.
        x: Secret exponent in :math:`[1, q-1]`.
        y: Public key :math:`g^x`.
        rng: Randomness source for the nonce.
        message: Optional context bound into the challenge.

    Raises:
        InvalidWitness: If ``x`` is out of range or does not match ``y``.
    """
    x = _check_secret(params, x)
    y = ensure_bn(y)
    if params.exp(params.g, x) != y:
        raise InvalidWitness("Secret does not match the public key")

    prover = SchnorrProver(params, KeyPair(secret=x, public=y), rng)
    a = prover.commit()
    e = challenge(params, y, a, message)
    z = prover.compute_response(e)
    return SchnorrProof(commitment=a, response=z)


def verify(params, y, proof, message=""):
    """
    Verify a non-interactive Schnorr proof.

    Never raises: malformed proofs and keys simply do not verify.

    Returns:
        bool: True if the proof is valid for ``y`` and ``message``.
    """
    try:
        a, z = proof.commitment, proof.response
        if not (params.is_element(a) and params.is_element(y)):
            return False
        e = challenge(params, y, a, message)
        return check_transcript(params, y, a, e, z)
    except (AttributeError, TypeError, ValueError, ArithmeticError):
        return False


def simulate(params, y, rng=None, challenge=None):
    r"""
    Produce an accepting transcript without the secret.

    Draw :math:`z` and :math:`e` first, then solve for :math:`a = g^z y^{-e}`. The output is
    distributed like an honest transcript, which is what makes the protocol zero-knowledge.

    Args:
        challenge: Optional challenge to enforce.
    """
    rng = get_rng(rng)
    e = params.random_scalar(rng) if challenge is None else ensure_bn(challenge)
    z = params.random_scalar(rng)
    a = params.mul(params.exp(params.g, z), params.exp(y, -e))
    return Transcript(commitment=a, challenge=e, response=z)


def extract_witness(params, first, second):
    r"""
    Knowledge extractor.

    From two accepting transcripts :math:`(a, e_1, z_1)` and :math:`(a, e_2, z_2)` that share
    the commitment, recover :math:`x = (z_1 - z_2)(e_1 - e_2)^{-1} \bmod q`.

    Raises:
        ValueError: If commitments differ or challenges coincide modulo :math:`q`.
        NonInvertibleError: If the challenge difference is not invertible (broken group).
    """
    if ensure_bn(first.commitment) != ensure_bn(second.commitment):
        raise ValueError("Transcripts must share the same commitment")
    q = params.q
    delta_e = ensure_bn(first.challenge).mod_sub(ensure_bn(second.challenge), q)
    if delta_e == 0:
        raise ValueError("Transcripts must have distinct challenges")
    delta_z = ensure_bn(first.response).mod_sub(ensure_bn(second.response), q)
    return delta_z.mod_mul(mod_inverse(delta_e, q), q)


def enc_SchnorrProof(obj):
    return encode([obj.commitment, obj.response])


def dec_SchnorrProof(data):
    return SchnorrProof(*decode(data))


register_coders(SchnorrProof, 21, enc_SchnorrProof, dec_SchnorrProof)
