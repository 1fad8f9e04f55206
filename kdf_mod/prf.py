from __future__ import annotations
import abc

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac


class PRFContext(abc.ABC):
    """Keyed-hash state for one derivation call.

    Lifecycle per PRF output: reset() -> set_key() -> write()... -> finalize().
    close() releases the context; using it as a context manager closes it on exit.
    """

    @abc.abstractmethod
    def reset(self) -> None: ...

    @abc.abstractmethod
    def set_key(self, key: bytes) -> None: ...

    @abc.abstractmethod
    def write(self, data: bytes) -> None: ...

    @abc.abstractmethod
    def finalize(self) -> bytes | None: ...

    @abc.abstractmethod
    def close(self) -> None: ...

    def __enter__(self) -> PRFContext:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class PRFProvider(abc.ABC):
    @abc.abstractmethod
    def digest_length(self, prf: str) -> int:
        """Output size in bytes of one PRF invocation, 0 if the PRF is unknown."""

    @abc.abstractmethod
    def open(self, prf: str) -> PRFContext: ...


# Name -> hash algorithm class. Availability depends on the OpenSSL build.
_ALGORITHMS: dict[str, type[hashes.HashAlgorithm]] = {
    "md5": hashes.MD5,
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha512_224": hashes.SHA512_224,
    "sha512_256": hashes.SHA512_256,
    "sha3_224": hashes.SHA3_224,
    "sha3_256": hashes.SHA3_256,
    "sha3_384": hashes.SHA3_384,
    "sha3_512": hashes.SHA3_512,
    "sm3": hashes.SM3,
}


def normalize_name(prf: str) -> str:
    # "SHA-256" -> "sha256", "SHA3-256" -> "sha3_256", "SHA512/256" -> "sha512_256"
    name = prf.strip().lower().replace("/", "_")
    if name.startswith("sha3-"):
        return "sha3_" + name[5:]
    return name.replace("-", "")


class HMACContext(PRFContext):
    def __init__(self, algorithm: hashes.HashAlgorithm):
        self._algorithm = algorithm
        self._hmac: hmac.HMAC | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def reset(self) -> None:
        self._hmac = None

    def set_key(self, key: bytes) -> None:
        if self._closed:
            raise RuntimeError("PRF context is closed.")
        self._hmac = hmac.HMAC(bytes(key), self._algorithm)

    def write(self, data: bytes) -> None:
        if self._hmac is None:
            raise RuntimeError("PRF context has no key.")
        self._hmac.update(bytes(data))

    def finalize(self) -> bytes | None:
        if self._hmac is None:
            return None
        h, self._hmac = self._hmac, None
        return h.finalize()

    def close(self) -> None:
        self._hmac = None
        self._closed = True


class HMACProvider(PRFProvider):
    """HMAC over the digests exposed by `cryptography`."""

    def _algorithm(self, prf: str) -> hashes.HashAlgorithm | None:
        cls = _ALGORITHMS.get(normalize_name(prf))
        if cls is None:
            return None
        algorithm = cls()
        try:
            hmac.HMAC(b"\x00", algorithm)
        except UnsupportedAlgorithm:
            return None
        return algorithm

    def digest_length(self, prf: str) -> int:
        algorithm = self._algorithm(prf)
        return 0 if algorithm is None else algorithm.digest_size

    def open(self, prf: str) -> HMACContext:
        algorithm = self._algorithm(prf)
        if algorithm is None:
            raise UnsupportedAlgorithm(f"Unsupported PRF: {prf}")
        return HMACContext(algorithm)


_default = HMACProvider()


def default_provider() -> HMACProvider:
    return _default


def available_prfs(provider: HMACProvider | None = None) -> list[tuple[str, int]]:
    provider = provider or _default
    out = []
    for name in _ALGORITHMS:
        size = provider.digest_length(name)
        if size:
            out.append((name, size))
    return out
