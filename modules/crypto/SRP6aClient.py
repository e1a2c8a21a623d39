#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SRP6aClient - client-side SRP-6a mathematics for the Battle.net login.

Purpose
-------
Mirror of the server session, used by tests and tools/clientSimulator.py to
drive a complete handshake. It consumes the LogonChallenge bytes exactly as
a client would receive them and produces the LogonProofRequest bytes the
server expects.

The class provides:
    * A calculation of A (client public value)
    * Derivation of shared session key K
    * Calculation of client proof M1
    * Verification of the server proof M2
"""

import hmac

from modules.crypto.SecureRandom import get_random
from modules.crypto.SRP6aCrypto import SRP6aCrypto
from modules.crypto.SRP6aErrors import DegenerateValueError, SessionStateError
from modules.crypto.SRP6aMessages import LogonChallenge, LogonProof, LogonProofRequest
from modules.crypto.SRP6aParameters import EPHEMERAL_BYTES, HASH_BYTES, MODULUS_BYTES


class SRP6aClient:
    """
    Implements the client-side SRP-6a math.

    Notes
    -----
    - Server sends (accountSalt, s, B, secondChallenge) in LogonChallenge.
    - x is derived from s and the password exactly like the registration
      verifier, so both sides agree on v without sending it.
    """

    def __init__(self, email: str, password: str) -> None:
        self.core = SRP6aCrypto()

        self.email = email
        self.password = password

        # Client secret exponent
        self.a_int = get_random().random_int(EPHEMERAL_BYTES)

        # Filled after the server challenge arrives
        self.challenge: LogonChallenge | None = None
        self.A_wire = None
        self.K = None
        self.M1 = None
        self.second_challenge_client = bytes(HASH_BYTES)

    # ------------------------------------------------------------------
    def load_challenge(self, data: bytes) -> None:
        """Decode the server's LogonChallenge."""
        challenge = LogonChallenge.decode(data)

        B_int = int.from_bytes(challenge.server_public, "little")
        if B_int % self.core.N == 0:
            raise DegenerateValueError("B mod N == 0")

        self.challenge = challenge

    # ------------------------------------------------------------------
    def compute_A(self) -> bytes:
        """A = g^a mod N, 128-byte little-endian."""
        A_int = pow(self.core.G, self.a_int, self.core.N)
        self.A_wire = self.core.int_to_le(A_int, MODULUS_BYTES)
        return self.A_wire

    # ------------------------------------------------------------------
    def compute_shared_key(self) -> bytes:
        """
        Derive shared secret S = (B - k*g^x)^(a + u*x) and session key K.

        Returns:
            bytes: Session key K (64 bytes).
        """
        if self.challenge is None:
            raise SessionStateError("SRP6aClient: challenge not loaded")
        if self.A_wire is None:
            self.compute_A()

        N = self.core.N
        B_wire = self.challenge.server_public
        B_int = int.from_bytes(B_wire, "little")

        u = self.core.compute_u(self.A_wire, B_wire)
        if u == 0:
            raise DegenerateValueError("u == 0")

        x = self.core.compute_x(self.password, self.challenge.password_salt)
        g_b = (B_int - self.core.k * pow(self.core.G, x, N)) % N

        S = pow(g_b, self.a_int + u * x, N)
        self.K = self.core.sha256_interleave(self.core.int_to_le(S, MODULUS_BYTES))
        return self.K

    # ------------------------------------------------------------------
    def compute_M1(self) -> bytes:
        """Client proof M1, 32 bytes."""
        if self.K is None:
            self.compute_shared_key()

        self.M1 = self.core.compute_M1(
            self.challenge.account_salt,
            self.challenge.password_salt,
            self.A_wire,
            self.challenge.server_public,
            self.K,
        )
        return self.M1

    def build_proof_request(self) -> bytes:
        """Encoded LogonProofRequest (cmd 2) carrying A, M1 and the seed."""
        if self.M1 is None:
            self.compute_M1()

        return LogonProofRequest(
            client_public=self.A_wire,
            client_proof=self.M1,
            second_challenge_client=self.second_challenge_client,
        ).encode()

    # ------------------------------------------------------------------
    def verify_server_proof(self, data: bytes) -> bool:
        """Check the server's LogonProof against H(A, M1, K)."""
        if self.M1 is None:
            raise SessionStateError("SRP6aClient: proof not computed")

        proof = LogonProof.decode(data)
        expected = self.core.compute_M2(self.A_wire, self.M1, self.K)
        return hmac.compare_digest(expected, proof.server_proof)
