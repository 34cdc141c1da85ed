"""Deterministic bucketing for experiment assignment.

A subject's bucket is derived from ``subject_id + experiment_id`` with the
classic 31-multiplier rolling string hash, wrapped to a signed 32-bit
integer at every step. Existing deployments computed the same hash over
UTF-16 code units, so the exact arithmetic below has to stay as it is or
previously assigned subjects will move between variants.
"""

BUCKET_COUNT = 100

_MASK_32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def _utf16_code_units(value: str):
    """Yield the UTF-16 code units of a string (surrogate pairs included)."""
    data = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def hash_code(value: str) -> int:
    """Compute the 32-bit signed rolling hash of a string.

    Args:
        value: String to hash.

    Returns:
        Hash in range [-2**31, 2**31).
    """
    h = 0
    for unit in _utf16_code_units(value):
        h = (h * 31 + unit) & _MASK_32

    if h & _SIGN_BIT:
        h -= 1 << 32
    return h


def bucket_for(experiment_id: str, subject_id: str) -> int:
    """Map a (experiment, subject) pair to a bucket in [0, 100).

    The subject id comes first in the hashed string.
    """
    return abs(hash_code(subject_id + experiment_id)) % BUCKET_COUNT
