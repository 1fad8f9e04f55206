from __future__ import annotations
import os
from dataclasses import dataclass

from .pbkdf2 import pbkdf2
from .prf import PRFProvider


@dataclass(frozen=True)
class KDFParams:
    prf: str = "sha256"
    # Tune for the target hardware; this is the OWASP figure for PBKDF2-HMAC-SHA256.
    iterations: int = 310_000
    salt_len: int = 16
    key_len: int = 32  # 32 bytes = 256-bit key


def new_salt(params: KDFParams = KDFParams()) -> bytes:
    return os.urandom(params.salt_len)


def derive_key(password, salt, params: KDFParams = KDFParams(),
               provider: PRFProvider | None = None) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    if not isinstance(salt, (bytes, bytearray, memoryview)):
        raise TypeError("Salt must be bytes.")

    return pbkdf2(
        params.prf,
        password,
        salt,
        params.iterations,
        params.key_len,
        provider=provider,
    )
