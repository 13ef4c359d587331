import pytest

from petlib.bn import Bn

from zkprimer.base import build_fiat_shamir_challenge
from zkprimer.utils.misc import ensure_bn, in_range, num_bytes
from zkprimer.utils.misc import int_to_fixed_bytes, fixed_bytes_to_int


@pytest.mark.parametrize("x", [2 ** 63, 2 ** 64 + 1, 2 ** 521 - 1, -(2 ** 100)])
def test_ensure_bn_large_ints(x):
    bn = ensure_bn(x)
    assert isinstance(bn, Bn)
    assert int(bn) == x


@pytest.mark.parametrize("x", ["5", 1.0, None, True])
def test_ensure_bn_rejects_non_integers(x):
    with pytest.raises(TypeError):
        ensure_bn(x)


def test_in_range_large_ints():
    big = 2 ** 200
    assert in_range(big, 1, big + 1)
    assert in_range(Bn(2).pow(200), 0, big)
    assert not in_range(big, 0, big - 1)
    assert not in_range(big, Bn(0), Bn(2).pow(100))


@pytest.mark.parametrize(
    "x,expected", [(0, 0), (1, 1), (255, 1), (256, 2), (2 ** 64, 9), (Bn(2).pow(1023), 128)]
)
def test_num_bytes(x, expected):
    assert num_bytes(x) == expected


def test_fixed_bytes_large_value():
    x = 2 ** 130 + 7
    data = int_to_fixed_bytes(x, 20)
    assert len(data) == 20
    assert int(fixed_bytes_to_int(data)) == x


def test_fiat_shamir_challenge_int_modulus():
    e = build_fiat_shamir_challenge("test", 11, Bn(4), Bn(8), message="m")
    assert isinstance(e, Bn)
    assert 0 <= e < 11
    assert e == build_fiat_shamir_challenge("test", Bn(11), Bn(4), Bn(8), message="m")


def test_fiat_shamir_challenge_large_int_modulus():
    modulus = 2 ** 127 - 1
    e = build_fiat_shamir_challenge("test", modulus, Bn(1))
    assert 0 <= int(e) < modulus
