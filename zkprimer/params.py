r"""
Safe-prime group parameters shared by every protocol in the library.

A :py:class:`GroupParameters` holds :math:`(p, q, g, h)` with :math:`p = 2q + 1`, and two
generators :math:`g, h` of the order-:math:`q` subgroup of :math:`\mathbb{Z}_p^*`. The second
generator :math:`h` is drawn independently of :math:`g`, so nobody knows :math:`\log_g h`;
Pedersen commitments rely on this for binding.

Group elements are plain :py:class:`petlib.bn.Bn` residues modulo :math:`p`. The group
operation is written multiplicatively.

>>> params = toy_parameters()
>>> params.exp(params.g, 7)
8
>>> params.is_element(params.mul(params.g, params.h))
True
"""

import struct

import attr
from petlib.pack import encode, decode, register_coders

from zkprimer.consts import DEFAULT_GROUP_BITS, DEFAULT_MR_ROUNDS
from zkprimer.consts import TOY_P, TOY_Q, TOY_G, TOY_H
from zkprimer.exceptions import ParameterError, DeserializationError
from zkprimer.primes import is_probably_prime, generate_safe_prime, find_generator
from zkprimer.utils.misc import ensure_bn, mod_inverse, in_range, num_bytes
from zkprimer.utils.misc import int_to_fixed_bytes, fixed_bytes_to_int
from zkprimer.utils.rand import get_rng


_WIDTH_HEADER = struct.Struct(">H")


@attr.s(frozen=True, repr=False)
class GroupParameters:
    """
    Immutable safe-prime group description.

    Construct through :py:meth:`from_ints` or :py:func:`generate_parameters` to get validated
    parameters; the bare constructor only converts the fields to big numbers.

    Args:
        p: Safe prime modulus.
        q: Prime order of the subgroup, :math:`q = (p - 1) / 2`.
        g: Generator of the subgroup.
        h: Second generator with unknown discrete logarithm base :math:`g`.
    """

    p = attr.ib(converter=ensure_bn)
    q = attr.ib(converter=ensure_bn)
    g = attr.ib(converter=ensure_bn)
    h = attr.ib(converter=ensure_bn)

    @classmethod
    def from_ints(cls, p, q, g, h, rounds=DEFAULT_MR_ROUNDS, rng=None):
        """
        Build and validate parameters.

        Raises:
            ParameterError: If the values do not form a valid safe-prime group.
        """
        try:
            params = cls(p, q, g, h)
        except TypeError as e:
            raise ParameterError("Group parameters must be integers") from e
        params.validate(rounds=rounds, rng=rng)
        return params

    def validate(self, rounds=DEFAULT_MR_ROUNDS, rng=None):
        """
        Check the structure of the group.

        Raises:
            ParameterError: On the first violated condition.
        """
        if self.q < 2 or self.p != self.q * 2 + 1:
            raise ParameterError("p must equal 2q + 1")
        if not is_probably_prime(self.q, rounds, rng):
            raise ParameterError("q is not prime")
        if not is_probably_prime(self.p, rounds, rng):
            raise ParameterError("p is not prime")
        for name, base in (("g", self.g), ("h", self.h)):
            if base == 1 or not self.is_element(base):
                raise ParameterError(
                    "{} does not generate the order-q subgroup".format(name)
                )
        if self.g == self.h:
            raise ParameterError("g and h must be distinct")

    def is_element(self, x):
        r"""
        Check that ``x`` lies in the order-:math:`q` subgroup.

        Anything that is not an integer in :math:`[1, p-1]` with :math:`x^q = 1` is rejected.
        """
        if not in_range(x, 1, self.p - 1):
            return False
        return ensure_bn(x).mod_pow(self.q, self.p) == 1

    def is_scalar(self, x):
        """Check that ``x`` is an integer in :math:`[0, q-1]`."""
        return in_range(x, 0, self.q - 1)

    def exp(self, base, exponent):
        """
        Modular exponentiation, accepting negative exponents.

        >>> params = toy_parameters()
        >>> params.mul(params.exp(4, -3), params.exp(4, 3))
        1
        """
        base = ensure_bn(base)
        exponent = ensure_bn(exponent)
        if exponent < 0:
            return mod_inverse(base, self.p).mod_pow(-exponent, self.p)
        return base.mod_pow(exponent, self.p)

    def mul(self, a, b):
        return ensure_bn(a).mod_mul(ensure_bn(b), self.p)

    def inv(self, a):
        return mod_inverse(a, self.p)

    def div(self, a, b):
        return self.mul(a, self.inv(b))

    def random_scalar(self, rng=None):
        r"""Uniform scalar in :math:`[1, q-1]`."""
        return get_rng(rng).random_below(self.q - 1) + 1

    @property
    def element_width(self):
        """Byte width of an encoded group element."""
        return num_bytes(self.p)

    @property
    def scalar_width(self):
        """Byte width of an encoded scalar."""
        return num_bytes(self.q)

    def to_ints(self):
        return (int(self.p), int(self.q), int(self.g), int(self.h))

    def to_bytes(self):
        """
        Fixed-width big-endian encoding of :math:`(p, q, g, h)`.

        A two-byte header stores the field width, followed by the four fields, each padded to
        the byte length of :math:`p`.

        >>> params = toy_parameters()
        >>> params.to_bytes().hex()
        '0001170b0409'
        """
        width = self.element_width
        fields = [int_to_fixed_bytes(x, width) for x in (self.p, self.q, self.g, self.h)]
        return _WIDTH_HEADER.pack(width) + b"".join(fields)

    @classmethod
    def from_bytes(cls, data, rounds=DEFAULT_MR_ROUNDS, rng=None):
        """
        Decode and validate parameters produced by :py:meth:`to_bytes`.

        Raises:
            DeserializationError: If the layout is wrong.
            ParameterError: If the decoded group is invalid.
        """
        if len(data) < _WIDTH_HEADER.size:
            raise DeserializationError("Truncated group parameters")
        (width,) = _WIDTH_HEADER.unpack_from(data)
        body = data[_WIDTH_HEADER.size :]
        if width == 0 or len(body) != 4 * width:
            raise DeserializationError(
                "Expected {} bytes of parameters, got {}".format(4 * width, len(body))
            )
        fields = [fixed_bytes_to_int(body[i * width : (i + 1) * width]) for i in range(4)]
        return cls.from_ints(*fields, rounds=rounds, rng=rng)

    def __repr__(self):
        return "GroupParameters(p={}, q={}, g={}, h={})".format(
            self.p, self.q, self.g, self.h
        )


def generate_parameters(bits=DEFAULT_GROUP_BITS, rng=None, rounds=DEFAULT_MR_ROUNDS):
    """
    Generate a fresh safe-prime group with two independent generators.

    >>> from zkprimer.utils.rand import SeededRandomSource
    >>> params = generate_parameters(32, rng=SeededRandomSource(b"doc"))
    >>> params.q.num_bits()
    32

    Args:
        bits: Bit length of the subgroup order :math:`q`.
        rng: Randomness source.
        rounds: Miller-Rabin rounds.
    """
    rng = get_rng(rng)
    p, q = generate_safe_prime(bits, rng=rng, rounds=rounds)
    g = find_generator(p, q, rng=rng)

    # h is drawn on its own so that no exponent relating it to g is ever computed.
    h = find_generator(p, q, rng=rng)
    while h == g:
        h = find_generator(p, q, rng=rng)

    return GroupParameters.from_ints(p, q, g, h, rounds=rounds, rng=rng)


def toy_parameters():
    """
    The textbook group :math:`p = 23, q = 11, g = 4, h = 9`.

    Far too small to hide anything; meant for examples and golden tests.
    """
    return GroupParameters.from_ints(TOY_P, TOY_Q, TOY_G, TOY_H)


def enc_GroupParameters(obj):
    return encode([obj.p, obj.q, obj.g, obj.h])


def dec_GroupParameters(data):
    return GroupParameters.from_ints(*decode(data))


register_coders(GroupParameters, 20, enc_GroupParameters, dec_GroupParameters)
