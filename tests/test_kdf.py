from __future__ import annotations
import hashlib

import pytest

from kdf_mod.errors import InvalidPRF
from kdf_mod.kdf import KDFParams, derive_key, new_salt


def test_new_salt_length():
    assert len(new_salt(KDFParams(salt_len=24))) == 24
    assert new_salt() != new_salt()


def test_derive_key_encodes_str_password():
    params = KDFParams(prf="sha256", iterations=10, key_len=48)
    salt = b"0123456789abcdef"
    expected = hashlib.pbkdf2_hmac("sha256", "pässword".encode("utf-8"), salt, 10, 48)
    assert derive_key("pässword", salt, params) == expected
    assert derive_key("pässword".encode("utf-8"), salt, params) == expected


def test_derive_key_default_length():
    assert len(derive_key("pw", b"salt", KDFParams(iterations=1))) == 32


def test_derive_key_rejects_str_salt():
    with pytest.raises(TypeError):
        derive_key("pw", "salt", KDFParams(iterations=1))


def test_derive_key_unknown_prf():
    with pytest.raises(InvalidPRF):
        derive_key("pw", b"salt", KDFParams(prf="nope", iterations=1))
