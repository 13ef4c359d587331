import math

from petlib.bn import Bn

from zkprimer.exceptions import NonInvertibleError


def ensure_bn(x):
    """
    Ensure that value is big number.

    Python integers of any size are accepted; ``Bn(x)`` alone only takes a machine word.

    >>> isinstance(ensure_bn(42), Bn)
    True
    >>> isinstance(ensure_bn(Bn(42)), Bn)
    True
    >>> ensure_bn(2 ** 100) == Bn(2).pow(100)
    True
    """
    if isinstance(x, Bn):
        return x
    if isinstance(x, bool) or not isinstance(x, int):
        raise TypeError("Expected an integer, got {!r}".format(x))
    return Bn.from_decimal(str(x))


def sum_bn_array(arr, modulus):
    """
    Sum an array of big numbers under a modulus.

    >>> a = [Bn(5), Bn(7)]
    >>> m = 10
    >>> sum_bn_array(a, m)
    2
    """
    modulus = ensure_bn(modulus)
    res = Bn(0)
    for elem in arr:
        res = res.mod_add(ensure_bn(elem), modulus)
    return res


def mod_inverse(x, modulus):
    """
    Modular inverse, checking invertibility first.

    >>> mod_inverse(3, 11)
    4

    Raises:
        NonInvertibleError: If :math:`\\gcd(x, modulus) \\neq 1`.
    """
    x = ensure_bn(x) % ensure_bn(modulus)
    modulus = ensure_bn(modulus)
    if math.gcd(int(x), int(modulus)) != 1:
        raise NonInvertibleError(
            "{} has no inverse modulo {}".format(x, modulus)
        )
    return x.mod_inverse(modulus)


def in_range(x, lo, hi):
    """
    Check :math:`lo \\leq x \\leq hi` for an integer-like ``x``.

    >>> in_range(Bn(3), 1, 10), in_range(0, 1, 10), in_range("3", 1, 10)
    (True, False, False)
    """
    if isinstance(x, bool) or not isinstance(x, (int, Bn)):
        return False
    return ensure_bn(lo) <= ensure_bn(x) <= ensure_bn(hi)


def int_to_fixed_bytes(x, width):
    """
    Big-endian, zero-padded encoding.

    >>> int_to_fixed_bytes(Bn(258), 4)
    b'\\x00\\x00\\x01\\x02'
    """
    raw = ensure_bn(x).binary() if x != 0 else b""
    if len(raw) > width:
        raise ValueError("{} does not fit in {} bytes".format(x, width))
    return b"\x00" * (width - len(raw)) + raw


def fixed_bytes_to_int(data):
    """
    >>> fixed_bytes_to_int(b"\\x00\\x01\\x02")
    258
    """
    data = data.lstrip(b"\x00")
    if not data:
        return Bn(0)
    return Bn.from_binary(data)


def num_bytes(x):
    """
    Byte length of the big-endian encoding of ``x``.

    >>> num_bytes(Bn(255)), num_bytes(256), num_bytes(0)
    (1, 2, 0)
    """
    return (ensure_bn(x).num_bits() + 7) // 8
