"""
Hashing to NIST prime-order curves (RFC 9380).

Implements expand_message_xmd, hash_to_field and the simplified SWU map for
short Weierstrass curves with a != 0 and p = 3 (mod 4), which covers P-256,
P-384 and P-521. Point addition is left to the caller's group backend.
"""

from typing import Any, Callable, List, Tuple

HashFactory = Callable[..., Any]


def i2osp(value: int, length: int) -> bytes:
    """Integer to octet string, big-endian, fixed length."""
    if value < 0 or value >= 1 << (8 * length):
        raise ValueError(f"Integer {value} does not fit in {length} bytes")
    return value.to_bytes(length, "big")


def os2ip(data: bytes) -> int:
    """Octet string to non-negative integer, big-endian."""
    return int.from_bytes(data, "big")


def _strxor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def expand_message_xmd(msg: bytes, dst: bytes, len_in_bytes: int, hash_fn: HashFactory) -> bytes:
    """
    Expand msg into len_in_bytes uniformly random bytes.

    Args:
        msg: Message to expand
        dst: Domain separation tag, at most 255 bytes
        len_in_bytes: Output length
        hash_fn: hashlib constructor (e.g. hashlib.sha384)

    Returns:
        Pseudorandom byte string of length len_in_bytes
    """
    hasher = hash_fn()
    b_in_bytes = hasher.digest_size
    s_in_bytes = hasher.block_size

    ell = -(-len_in_bytes // b_in_bytes)
    if ell > 255 or len_in_bytes > 65535:
        raise ValueError(f"Requested output length {len_in_bytes} is too large")
    if len(dst) > 255:
        raise ValueError("Domain separation tag longer than 255 bytes")

    dst_prime = dst + i2osp(len(dst), 1)
    msg_prime = i2osp(0, s_in_bytes) + msg + i2osp(len_in_bytes, 2) + i2osp(0, 1) + dst_prime

    b_0 = hash_fn(msg_prime).digest()
    b_i = hash_fn(b_0 + i2osp(1, 1) + dst_prime).digest()
    uniform_bytes = b_i
    for i in range(2, ell + 1):
        b_i = hash_fn(_strxor(b_0, b_i) + i2osp(i, 1) + dst_prime).digest()
        uniform_bytes += b_i

    return uniform_bytes[:len_in_bytes]


def hash_to_field(
    msg: bytes,
    count: int,
    dst: bytes,
    modulus: int,
    length: int,
    hash_fn: HashFactory,
) -> List[int]:
    """Hash msg to count elements of the prime field GF(modulus)."""
    uniform_bytes = expand_message_xmd(msg, dst, count * length, hash_fn)
    return [
        os2ip(uniform_bytes[length * i : length * (i + 1)]) % modulus
        for i in range(count)
    ]


def is_square(x: int, p: int) -> bool:
    """Euler's criterion; zero counts as a square."""
    x %= p
    return x == 0 or pow(x, (p - 1) // 2, p) == 1


def sqrt_mod(x: int, p: int) -> int:
    """Square root modulo p for p = 3 (mod 4). Caller checks is_square first."""
    return pow(x % p, (p + 1) // 4, p)


def sgn0(x: int) -> int:
    return x % 2


def map_to_curve_sswu(u: int, p: int, a: int, b: int, z: int) -> Tuple[int, int]:
    """
    Simplified Shallue-van de Woestijne-Ulas map (RFC 9380, 6.6.2).

    Maps a field element u to an affine point (x, y) on y^2 = x^3 + a*x + b.
    """
    a %= p
    b %= p
    z %= p

    u2 = u * u % p
    tv1 = (z * z * u2 * u2 + z * u2) % p
    tv1 = pow(tv1, p - 2, p)  # inv0: zero maps to zero

    if tv1 == 0:
        x1 = b * pow(z * a, p - 2, p) % p
    else:
        x1 = (-b) * pow(a, p - 2, p) * (1 + tv1) % p

    gx1 = (pow(x1, 3, p) + a * x1 + b) % p
    x2 = z * u2 * x1 % p
    gx2 = (pow(x2, 3, p) + a * x2 + b) % p

    if is_square(gx1, p):
        x, y = x1, sqrt_mod(gx1, p)
    else:
        x, y = x2, sqrt_mod(gx2, p)

    if sgn0(u) != sgn0(y):
        y = (p - y) % p
    return x, y
