from __future__ import annotations


class PKCS5Error(ValueError):
    """Base class for PBKDF2 derivation failures."""


class InvalidPRF(PKCS5Error):
    """PRF is unknown, has an unsupported output size, or failed mid-derivation."""


class InvalidIterationCount(PKCS5Error):
    pass


class InvalidDerivedKeyLength(PKCS5Error):
    pass


class DerivedKeyTooLong(PKCS5Error):
    pass
