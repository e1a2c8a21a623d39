#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SRP-6a domain parameters (Battle.net flavour).

    N    1024-bit safe prime, all arithmetic is done modulo N
    g    generator, 2
    k    multiplier, k = H(N | g)

All three are fixed for the lifetime of the process and shared by every
login session. N is kept here in big-endian hex for readability; on the
wire and inside hashes it is always the 128-byte little-endian form.
"""

import hashlib
from dataclasses import dataclass, field

from Crypto.Util.number import isPrime

from utils.ConfigLoader import ConfigLoader
from utils.Logger import Logger

# GLOBALS
_parameters = None

N_HEX_BE: str = (
    "86A7F6DEEB306CE519770FE37D556F29944132554DED0BD68205E27F3231FEF5"
    "A10108238A3150C59CAF7B0B6478691C13A6ACF5E1B5ADAFD4A943D4A21A142B"
    "800E8A55F8BFBAC700EB77A7235EE5A609E350EA9FC19F10D921C2FA832E4461"
    "B7125D38D254A0BE873DFC27858ACB3F8B9F258461E4373BC3A6C2A9634324AB"
)
G: int = 2

MODULUS_BYTES: int = 128
HASH_BYTES: int = 32
SALT_BYTES: int = 32
SESSION_KEY_BYTES: int = 64
# width of the server secret b, used as drawn (never reduced mod N)
EPHEMERAL_BYTES: int = 128


@dataclass(frozen=True)
class SRP6aParameters:
    """Immutable parameter set; use get_parameters() for the shared instance."""

    n_hex_be: str = field(default=N_HEX_BE, repr=False)
    g: int = G

    N: int = field(init=False, repr=False)
    N_bytes: bytes = field(init=False, repr=False)
    g_bytes: bytes = field(init=False, repr=False)
    k: int = field(init=False, repr=False)
    ng_xor: bytes = field(init=False, repr=False)

    def __post_init__(self):
        n_be = bytes.fromhex(self.n_hex_be)
        if len(n_be) != MODULUS_BYTES:
            raise ValueError(f"N must be {MODULUS_BYTES} bytes, got {len(n_be)}")

        N_bytes = n_be[::-1]
        g_bytes = self.g.to_bytes(1, "little")

        hash_n = hashlib.sha256(N_bytes).digest()
        hash_g = hashlib.sha256(g_bytes).digest()

        # frozen dataclass: derived fields are set once here
        object.__setattr__(self, "N", int.from_bytes(N_bytes, "little"))
        object.__setattr__(self, "N_bytes", N_bytes)
        object.__setattr__(self, "g_bytes", g_bytes)
        object.__setattr__(
            self, "k", int.from_bytes(hashlib.sha256(N_bytes + g_bytes).digest(), "little")
        )
        object.__setattr__(self, "ng_xor", bytes(x ^ y for x, y in zip(hash_n, hash_g)))

    def validate(self) -> None:
        """
        Check that N is a safe prime and g a usable generator.

        Raises:
            ValueError: if any check fails.
        """
        if self.N.bit_length() != MODULUS_BYTES * 8:
            raise ValueError(f"N must be a {MODULUS_BYTES * 8}-bit number")
        if not isPrime(self.N):
            raise ValueError("N is not prime")
        if not isPrime((self.N - 1) // 2):
            raise ValueError("N is not a safe prime")
        if not 1 < self.g < self.N - 1:
            raise ValueError("g out of range")
        if self.k % self.N == 0:
            raise ValueError("k reduces to zero modulo N")


def get_parameters() -> SRP6aParameters:
    """
    Returns the process-wide parameter set, building it on first use.
    The safe-prime check runs once when crypto.validate_parameters is set.
    """
    global _parameters
    if _parameters is None:
        params = SRP6aParameters()
        if ConfigLoader.get_config().get("crypto", {}).get("validate_parameters"):
            params.validate()
            Logger.debug("[SRP6a] Domain parameters validated (safe prime N)")
        _parameters = params
    return _parameters
