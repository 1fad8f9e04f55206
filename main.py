from __future__ import annotations
import argparse
import logging
import sys
from getpass import getpass

from kdf_mod.errors import PKCS5Error
from kdf_mod.kdf import KDFParams, derive_key, new_salt
from kdf_mod.prf import available_prfs


def read_password(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\r\n")
    return getpass("Password: ")


def parse_salt(value: str | None, params: KDFParams) -> bytes:
    if value is None:
        return new_salt(params)
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise ValueError(f"Salt is not valid hex: {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    defaults = KDFParams()
    parser = argparse.ArgumentParser(
        prog="keyderive",
        description="Derive key material from a password with PBKDF2 (PKCS#5 v2.0).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    der = sub.add_parser("derive", help="Derive a key and print it as hex")
    der.add_argument("--prf", default=defaults.prf, help=f"HMAC digest (default: {defaults.prf})")
    der.add_argument("-i", "--iterations", type=int, default=defaults.iterations,
                     help=f"Iteration count (default: {defaults.iterations})")
    der.add_argument("-l", "--length", type=int, default=defaults.key_len,
                     help=f"Derived key length in bytes (default: {defaults.key_len})")
    der.add_argument("-s", "--salt", help="Salt as hex (default: random)")
    der.add_argument("--salt-len", type=int, default=defaults.salt_len,
                     help=f"Random salt length in bytes (default: {defaults.salt_len})")
    der.add_argument("--password-stdin", action="store_true",
                     help="Read the password from the first line of stdin")

    sub.add_parser("prfs", help="List supported PRFs and their output sizes")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.cmd == "prfs":
        for name, size in available_prfs():
            print(f"{name}\t{size}")
        return 0

    params = KDFParams(
        prf=args.prf,
        iterations=args.iterations,
        salt_len=args.salt_len,
        key_len=args.length,
    )
    try:
        salt = parse_salt(args.salt, params)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    password = read_password(args.password_stdin)

    try:
        key = derive_key(password, salt, params)
    except PKCS5Error as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"salt={salt.hex()}")
    print(f"key={key.hex()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
