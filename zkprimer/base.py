"""
Common classes: transcripts, the Fiat-Shamir challenge, and interactive prover/verifier roles.
"""

import abc
from hashlib import sha256

import attr
from petlib.bn import Bn
from petlib.pack import encode

from zkprimer.exceptions import ProtocolStateError
from zkprimer.utils.misc import ensure_bn


@attr.s(frozen=True)
class Transcript:
    """
    Transcript :math:`(a, e, z)` of one run of a three-move sigma protocol.
    """

    commitment = attr.ib()
    challenge = attr.ib()
    response = attr.ib()


def build_fiat_shamir_challenge(tag, modulus, *args, message=""):
    """Generate a Fiat-Shamir challenge.

    Every item is msgpack-encoded through :py:func:`petlib.pack.encode` before hashing. The
    encoding is self-delimiting, so distinct argument lists never hash the same byte string.

    >>> e = build_fiat_shamir_challenge("doc", 11, Bn(4), Bn(8))
    >>> 0 <= e < 11
    True

    Args:
        tag: Domain-separation string of the protocol.
        modulus: Challenge space size, usually the group order :math:`q`.
        args: Items to hash (public values and commitments).
        message: Optional context, e.g., to make a signature proof of knowledge.
    """
    prehash = sha256(encode(tag))
    for elem in args:
        prehash.update(encode(elem))
    prehash.update(encode(message))
    return Bn.from_hex(prehash.hexdigest()) % ensure_bn(modulus)


class Prover(metaclass=abc.ABCMeta):
    """
    Abstract interface representing a Prover in a three-move sigma protocol.

    A prover draws a single-use nonce in :py:meth:`commit` and spends it in
    :py:meth:`compute_response`.
    """

    def __init__(self, params):
        self.params = params
        self._nonce = None

    @abc.abstractmethod
    def internal_commit(self):
        """Draw a nonce and return ``(nonce, commitment)``."""

    @abc.abstractmethod
    def internal_response(self, nonce, challenge):
        """Return the response for the given nonce and challenge."""

    def commit(self):
        """
        Construct the proof commitment.
        """
        if self._nonce is not None:
            raise ProtocolStateError("Commitment already sent, waiting for a challenge")
        self._nonce, commitment = self.internal_commit()
        return commitment

    def compute_response(self, challenge):
        """
        Answer the verifier's challenge. The nonce is erased afterwards.
        """
        if self._nonce is None:
            raise ProtocolStateError("No pending commitment; nonces are single-use")
        nonce, self._nonce = self._nonce, None
        return self.internal_response(nonce, challenge)


class Verifier(metaclass=abc.ABCMeta):
    """
    Abstract interface representing a Verifier in a three-move sigma protocol.
    """

    def __init__(self, params):
        self.params = params
        self.commitment = None
        self.challenge = None

    @abc.abstractmethod
    def draw_challenge(self):
        """Return a fresh random challenge."""

    @abc.abstractmethod
    def check(self, commitment, challenge, response):
        """Return True if the transcript is accepting."""

    def send_challenge(self, commitment):
        """
        Store the received commitment and generate a challenge.
        """
        if self.commitment is not None:
            raise ProtocolStateError("Challenge already issued for this session")
        self.commitment = commitment
        self.challenge = self.draw_challenge()
        return self.challenge

    def verify(self, response):
        """
        Verify the response of an interactive sigma protocol.

        Returns:
            bool: True if verification succeeded, False otherwise.
        """
        if self.commitment is None:
            return False
        return self.check(self.commitment, self.challenge, response)
