"""PBKDF2 (PKCS#5 v2.0, section 5.2).

    DK = T_1 || T_2 || ... || T_l<0..r-1>
    T_i = U_1 ^ U_2 ^ ... ^ U_c
    U_1 = PRF(P, S || INT(i)),  U_k = PRF(P, U_{k-1})

The PRF is injected through a PRFProvider; HMAC from `cryptography` is the default.
"""
from __future__ import annotations
import logging

from .errors import (
    DerivedKeyTooLong,
    InvalidDerivedKeyLength,
    InvalidIterationCount,
    InvalidPRF,
)
from .prf import PRFContext, PRFProvider, default_provider

logger = logging.getLogger(__name__)

# Largest PRF output the engine accepts.
MAX_PRF_BLOCK_LEN = 80

MAX_BLOCK_INDEX = 2**32 - 1


def int32_be(i: int) -> bytes:
    """Encode i as 4 bytes, most significant first."""
    if not 0 <= i <= MAX_BLOCK_INDEX:
        raise OverflowError(f"Block index out of range: {i}")
    return i.to_bytes(4, "big")


def block_layout(dk_len: int, h_len: int) -> tuple[int, int]:
    """Return (l, r): block count and byte length of the final block."""
    l = -(-dk_len // h_len)
    r = dk_len - (l - 1) * h_len
    return l, r


def _check_bytes_like(name: str, value) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like.")
    return bytes(value)


def _validate(provider: PRFProvider, prf: str, iterations: int, dk_len: int) -> int:
    h_len = provider.digest_length(prf)
    if h_len <= 0 or h_len > MAX_PRF_BLOCK_LEN:
        raise InvalidPRF(f"Unsupported PRF {prf!r} (output size {h_len}).")
    if iterations < 1:
        raise InvalidIterationCount(f"Iteration count must be >= 1, got {iterations}.")
    if dk_len < 1:
        raise InvalidDerivedKeyLength(f"Derived key length must be >= 1, got {dk_len}.")
    if dk_len > MAX_BLOCK_INDEX * h_len:
        raise DerivedKeyTooLong(
            f"Derived key length {dk_len} exceeds (2^32 - 1) * {h_len} bytes."
        )
    return h_len


def _iterate(ctx: PRFContext, password: bytes, data: bytes, h_len: int) -> bytes:
    ctx.reset()
    try:
        ctx.set_key(password)
    except Exception as e:
        raise InvalidPRF("PRF rejected the password as key.") from e
    try:
        ctx.write(data)
        u = ctx.finalize()
    except Exception as e:
        raise InvalidPRF("PRF failed to produce a digest.") from e
    if u is None or len(u) != h_len:
        raise InvalidPRF("PRF returned no digest or a digest of the wrong size.")
    return u


def _fill(ctx: PRFContext, password: bytes, salt: bytes, iterations: int,
          h_len: int, out: memoryview) -> None:
    dk_len = len(out)
    l, r = block_layout(dk_len, h_len)
    t = bytearray(h_len)
    for i in range(1, l + 1):
        t[:] = bytes(h_len)
        u = salt + int32_be(i)
        for _ in range(iterations):
            u = _iterate(ctx, password, u, h_len)
            for k in range(h_len):
                t[k] ^= u[k]
        n = r if i == l else h_len
        offset = (i - 1) * h_len
        out[offset : offset + n] = t[:n]


def pbkdf2_into(prf: str, password, salt, iterations: int, out, *,
                provider: PRFProvider | None = None) -> None:
    """Derive len(out) bytes into the writable buffer `out`.

    Raises InvalidPRF, InvalidIterationCount, InvalidDerivedKeyLength or
    DerivedKeyTooLong. The contents of `out` are unspecified after a failure.
    """
    password_b = _check_bytes_like("password", password)
    salt_b = _check_bytes_like("salt", salt)
    try:
        view = memoryview(out)
    except TypeError as e:
        raise TypeError("Output must be a writable buffer.") from e
    if view.readonly:
        raise TypeError("Output must be a writable buffer.")
    view = view.cast("B")

    provider = provider or default_provider()
    h_len = _validate(provider, prf, iterations, len(view))

    logger.debug("PBKDF2-%s: deriving %d bytes, %d iterations", prf, len(view), iterations)
    try:
        ctx = provider.open(prf)
    except Exception as e:
        raise InvalidPRF(f"Could not open PRF {prf!r}.") from e
    with ctx:
        _fill(ctx, password_b, salt_b, iterations, h_len, view)
    logger.debug("PBKDF2-%s: derived %d bytes", prf, len(view))


def pbkdf2(prf: str, password, salt, iterations: int, dk_len: int, *,
           provider: PRFProvider | None = None) -> bytes:
    provider = provider or default_provider()
    # validate before allocating dk_len bytes
    _validate(provider, prf, iterations, dk_len)
    dk = bytearray(dk_len)
    pbkdf2_into(prf, password, salt, iterations, dk, provider=provider)
    return bytes(dk)
