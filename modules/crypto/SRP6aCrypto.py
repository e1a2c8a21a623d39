#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import hashlib
import hmac

from modules.crypto.SecureRandom import get_random
from modules.crypto.SRP6aErrors import (
    AuthenticationRejected,
    DegenerateValueError,
    MalformedInputError,
)
from modules.crypto.SRP6aParameters import (
    EPHEMERAL_BYTES,
    HASH_BYTES,
    MODULUS_BYTES,
    SALT_BYTES,
    SESSION_KEY_BYTES,
    get_parameters,
)
from utils.Logger import Logger


class SRP6aCrypto:
    """
    Implements the SRP-6a math used by the Battle.net login handshake.
    This class isolates all hashing and modular arithmetic, with fixed
    little-endian widths and ASCII uppercase rules.

    The class provides:
        * Salt + verifier generation
        * Server-side B generation
        * Server-side verification of A + M1
        * Session proof M2 generation

    H() is SHA-256 everywhere. Integers are encoded little-endian, 32 bytes
    for hash-width values and 128 bytes for modulus-width values.
    """

    def __init__(self) -> None:
        params = get_parameters()
        self.params = params
        self.N = params.N
        self.G = params.g
        self.k = params.k

    # ======================================================================
    # Utility: ASCII-only uppercase
    # ======================================================================

    @staticmethod
    def upper_ascii(text: str) -> str:
        """
        Converts ASCII characters a-z to uppercase while leaving
        all non-basic-latin characters untouched.
        """
        return "".join(
            chr(ord(char) - 0x20) if "a" <= char <= "z" else char
            for char in text
        )

    # ======================================================================
    # Hash helpers
    # ======================================================================

    @staticmethod
    def sha256(*parts: bytes) -> bytes:
        """
        Computes SHA-256 over concatenated byte sequences.

        Returns:
            bytes: SHA-256 digest (32 bytes).
        """
        sha = hashlib.sha256()
        for part in parts:
            if isinstance(part, int):
                raise TypeError("sha256(): pass ints as bytes explicitly")
            sha.update(part)
        return sha.digest()

    def sha256_to_int_le(self, *parts: bytes) -> int:
        """Computes SHA-256 and interprets the digest as a little-endian integer."""
        return int.from_bytes(self.sha256(*parts), "little")

    @staticmethod
    def int_to_le(value: int, width: int = MODULUS_BYTES) -> bytes:
        """
        Convert a non-negative integer into exactly `width` little-endian bytes.

        Raises:
            MalformedInputError: if the value does not fit. Nothing is truncated.
        """
        if value < 0:
            raise MalformedInputError("negative integers have no wire encoding")
        try:
            return value.to_bytes(width, "little")
        except OverflowError:
            raise MalformedInputError(f"value does not fit in {width} bytes")

    @staticmethod
    def le_to_int(data: bytes, width: int, name: str = "value") -> int:
        """Decode a fixed-width little-endian field, rejecting any other width."""
        SRP6aCrypto.require_width(data, width, name)
        return int.from_bytes(data, "little")

    @staticmethod
    def require_width(data: bytes, width: int, name: str) -> bytes:
        if not isinstance(data, (bytes, bytearray)):
            raise MalformedInputError(f"{name} must be bytes")
        if len(data) != width:
            raise MalformedInputError(f"{name} must be {width} bytes, got {len(data)}")
        return bytes(data)

    # ======================================================================
    # SHA-256 interleave (session key)
    # ======================================================================

    def sha256_interleave(self, s_bytes: bytes) -> bytes:
        """
        Compute the 64-byte session key K from the 128-byte shared secret S.

        even = S[0], S[2], ...   odd = S[1], S[3], ...
        K[2i] = H(even)[i], K[2i+1] = H(odd)[i]
        """
        self.require_width(s_bytes, MODULUS_BYTES, "S")

        h0 = self.sha256(s_bytes[0::2])
        h1 = self.sha256(s_bytes[1::2])

        out = bytearray(SESSION_KEY_BYTES)
        for i in range(HASH_BYTES):
            out[2 * i] = h0[i]
            out[2 * i + 1] = h1[i]

        return bytes(out)

    # ======================================================================
    # Account generation
    # ======================================================================

    @staticmethod
    def generate_salt() -> bytes:
        """Return a cryptographically secure 32-byte salt."""
        return get_random().random_bytes(SALT_BYTES)

    @staticmethod
    def identity_salt(email: str) -> bytes:
        """Per-account identity salt: SHA-256 of the e-mail address."""
        return SRP6aCrypto.sha256(email.encode("utf-8"))

    def compute_x(self, password: str, salt: bytes) -> int:
        """x = H(UPPER(hex(salt)) ":" UPPER(password)) as a little-endian int."""
        self.require_width(salt, SALT_BYTES, "salt")
        salt_hex = salt.hex().upper()
        password_u = self.upper_ascii(password)
        return self.sha256_to_int_le(f"{salt_hex}:{password_u}".encode("utf-8"))

    def calculate_verifier(self, identity: str, password: str, salt: bytes) -> bytes:
        """
        Create the SRP verifier v = g^x mod N.

        Args:
            identity (str): Account identity, used for logging only.
            password (str): Cleartext password (ASCII uppercase applied).
            salt (bytes): 32-byte password salt.

        Returns:
            bytes: 128-byte little-endian verifier.
        """
        x = self.compute_x(password, salt)
        verifier = self.int_to_le(pow(self.G, x, self.N), MODULUS_BYTES)

        Logger.debug(f"[SRP6a] Derived verifier for {identity}")
        return verifier

    def check_password(
        self,
        identity: str,
        password: str,
        salt: bytes,
        verifier: bytes,
    ) -> bool:
        """
        Verify that password+salt produces the stored verifier.

        Returns:
            bool: True if the verifier matches, False otherwise.
        """
        expected = self.calculate_verifier(identity, password, salt)
        return hmac.compare_digest(expected, verifier)

    def make_registration(self, identity: str, password: str) -> tuple[bytes, bytes]:
        """
        Generate a fresh 32-byte salt and the matching 128-byte verifier.

        Returns:
            (salt_bytes, verifier_bytes)
        """
        salt = self.generate_salt()
        verifier = self.calculate_verifier(identity, password, salt)
        return salt, verifier

    # ======================================================================
    # Server-side B generation
    # ======================================================================

    @staticmethod
    def server_make_b_value() -> int:
        """Generate the private server exponent b from 128 random bytes."""
        return get_random().random_int(EPHEMERAL_BYTES)

    def compute_B(self, b_value: int, v_int: int) -> int:
        """B = (k*v + g^b) mod N."""
        return (self.k * v_int + pow(self.G, b_value, self.N)) % self.N

    def server_make_B(self, verifier: bytes) -> tuple[int, bytes]:
        """
        Generate b and compute the server public value B.

        Returns:
            (b_value, B_bytes) with B as 128 little-endian bytes.
        """
        v_int = self.le_to_int(verifier, MODULUS_BYTES, "verifier")

        b_value = self.server_make_b_value()
        B_int = self.compute_B(b_value, v_int)

        return b_value, self.int_to_le(B_int, MODULUS_BYTES)

    # ======================================================================
    # Handshake math: u, S, K
    # ======================================================================

    def compute_u(self, a_bytes: bytes, b_bytes: bytes) -> int:
        """Compute the SRP scrambling parameter u = H(A | B) as little-endian int."""
        return self.sha256_to_int_le(a_bytes, b_bytes)

    def _server_compute_S(
        self,
        a_public: bytes,
        verifier: bytes,
        b_value: int,
        u_value: int,
    ) -> bytes:
        """
        S = (A * v^u)^b mod N as 128 little-endian bytes.

        S stays inside this class; callers only ever see K and proofs.
        """
        a_int = self.le_to_int(a_public, MODULUS_BYTES, "A")
        v_int = self.le_to_int(verifier, MODULUS_BYTES, "verifier")

        if a_int % self.N == 0:
            raise DegenerateValueError("A mod N == 0")
        if u_value == 0:
            raise DegenerateValueError("u == 0")

        base = (a_int * pow(v_int, u_value, self.N)) % self.N
        return self.int_to_le(pow(base, b_value, self.N), MODULUS_BYTES)

    # ======================================================================
    # Proof values M1 and M2
    # ======================================================================

    def compute_M1(
        self,
        identity_salt: bytes,
        salt: bytes,
        a_bytes: bytes,
        b_bytes: bytes,
        k_bytes: bytes,
    ) -> bytes:
        """
        Compute the client proof M1.

        M1 = H( H(N) xor H(g), H(I), s, A, B, K )

        I is the identity salt as uppercase hex text, the same string
        the client hashes.
        """
        hash_i = self.sha256(identity_salt.hex().upper().encode("ascii"))
        return self.sha256(self.params.ng_xor, hash_i, salt, a_bytes, b_bytes, k_bytes)

    def compute_M2(self, a_bytes: bytes, m1_bytes: bytes, k_bytes: bytes) -> bytes:
        """Compute the server's session proof M2 = H(A, M1, K)."""
        return self.sha256(a_bytes, m1_bytes, k_bytes)

    # ======================================================================
    # Full server verification (A + M1)
    # ======================================================================

    def server_verify(
        self,
        identity_salt: bytes,
        salt: bytes,
        verifier: bytes,
        b_value: int,
        b_public: bytes,
        a_public: bytes,
        m1_client: bytes,
    ) -> tuple[bytes, bytes]:
        """
        Perform full server-side verification of the client's A + M1.

        Returns:
            (M2_bytes, K_bytes) on success.

        Raises:
            MalformedInputError, DegenerateValueError, AuthenticationRejected
        """
        self.require_width(a_public, MODULUS_BYTES, "A")
        self.require_width(m1_client, HASH_BYTES, "M1")

        u_value = self.compute_u(a_public, b_public)
        s_bytes = self._server_compute_S(a_public, verifier, b_value, u_value)
        k_bytes = self.sha256_interleave(s_bytes)

        m1_server = self.compute_M1(identity_salt, salt, a_public, b_public, k_bytes)

        if not hmac.compare_digest(m1_server, m1_client):
            raise AuthenticationRejected("client proof mismatch")

        m2 = self.compute_M2(a_public, m1_server, k_bytes)
        return m2, k_bytes
