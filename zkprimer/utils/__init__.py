from zkprimer.utils.misc import (
    ensure_bn,
    sum_bn_array,
    mod_inverse,
    in_range,
    num_bytes,
    int_to_fixed_bytes,
    fixed_bytes_to_int,
)
from zkprimer.utils.rand import (
    SystemRandomSource,
    SeededRandomSource,
    get_rng,
    random_in_range,
    random_odd_with_bits,
)
