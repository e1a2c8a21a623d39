#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from enum import Enum

from modules.crypto.SecondFactor import SecondFactor, get_second_factor
from modules.crypto.SRP6aCrypto import SRP6aCrypto
from modules.crypto.SRP6aErrors import MalformedInputError, SessionStateError, SRP6aError
from modules.crypto.SRP6aMessages import LogonChallenge, LogonProof, LogonProofRequest
from modules.crypto.SRP6aParameters import HASH_BYTES, MODULUS_BYTES, SALT_BYTES
from utils.Logger import Logger


class SessionState(Enum):
    NEW = "new"
    CHALLENGED = "challenged"
    FINISHED = "finished"


class SRP6aSession:
    """
    Server-side SRP-6a login session, one per authentication attempt.

    Stores the account's identity salt, password salt and verifier and
    delegates math to SRP6aCrypto(). A session issues exactly one challenge
    and accepts exactly one proof; afterwards it is finished whatever the
    outcome and must be discarded.
    """

    def __init__(
        self,
        email: str,
        identity_salt: bytes,
        salt: bytes,
        verifier: bytes,
        second_factor: SecondFactor | None = None,
    ):
        self.core = SRP6aCrypto()

        self.email = email
        self.identity_salt = self.core.require_width(identity_salt, HASH_BYTES, "identity salt")
        self.salt = self.core.require_width(salt, SALT_BYTES, "salt")
        self.verifier = self.core.require_width(verifier, MODULUS_BYTES, "verifier")
        self.second_factor = second_factor or get_second_factor()

        self.state = SessionState.NEW

        self._b_value = None
        self.B_bytes = None
        self.second_challenge = None

        self.logon_challenge: bytes | None = None
        self.logon_proof: bytes | None = None
        self.session_key: bytes | None = None

    @property
    def authenticated(self) -> bool:
        return self.session_key is not None

    # ------------------------------------------------------------------

    def build_challenge(self) -> bytes:
        """
        Creates b and B and returns the encoded LogonChallenge (cmd 0).
        """
        if self.state is not SessionState.NEW:
            raise SessionStateError(f"challenge already issued (state={self.state.value})")

        self._b_value, self.B_bytes = self.core.server_make_B(self.verifier)
        self.second_challenge = self.second_factor.challenge(self)

        self.logon_challenge = LogonChallenge(
            account_salt=self.identity_salt,
            password_salt=self.salt,
            server_public=self.B_bytes,
            second_challenge=self.second_challenge,
        ).encode()

        self.state = SessionState.CHALLENGED
        Logger.debug(f"[SRP6a] Challenge issued for {self.email} (second_factor={self.second_factor.name})")
        return self.logon_challenge

    # ------------------------------------------------------------------

    def verify_proof(self, A_bytes: bytes, M1_bytes: bytes, seed: bytes):
        """
        Validates client public value A and proof M1.

        Returns (ok, LogonProof bytes, session_key). Every failure looks the
        same to the caller: (False, None, None).

        Raises:
            RuntimeError: the second factor strategy returned a malformed proof.
        """
        if self.state is not SessionState.CHALLENGED:
            raise SessionStateError(f"no pending challenge (state={self.state.value})")

        # single use, even if verification raises
        self.state = SessionState.FINISHED
        b_value, self._b_value = self._b_value, None

        try:
            self.core.require_width(seed, HASH_BYTES, "second challenge client value")

            M2, k_bytes = self.core.server_verify(
                identity_salt=self.identity_salt,
                salt=self.salt,
                verifier=self.verifier,
                b_value=b_value,
                b_public=self.B_bytes,
                a_public=A_bytes,
                m1_client=M1_bytes,
            )
        except SRP6aError as exc:
            Logger.warning(f"[SRP6a] Logon proof rejected for {self.email}")
            Logger.debug(f"[SRP6a] Rejection reason: {type(exc).__name__}")
            return False, None, None

        # client proof accepted; errors below are server misconfiguration
        try:
            second_proof = self.second_factor.proof(self, bytes(seed))
            logon_proof = LogonProof(server_proof=M2, second_proof=second_proof).encode()
        except MalformedInputError as exc:
            Logger.error(f"[SRP6a] Second factor '{self.second_factor.name}' produced an invalid proof: {exc}")
            raise RuntimeError(f"Second factor '{self.second_factor.name}' is misconfigured") from exc

        self.logon_proof = logon_proof
        self.session_key = k_bytes

        Logger.success(f"[SRP6a] {self.email} authenticated")
        return True, logon_proof, k_bytes

    def verify_message(self, data: bytes):
        """Decode a raw LogonProofRequest and verify it."""
        if self.state is not SessionState.CHALLENGED:
            raise SessionStateError(f"no pending challenge (state={self.state.value})")

        try:
            request = LogonProofRequest.decode(data)
        except SRP6aError:
            self.state = SessionState.FINISHED
            self._b_value = None
            Logger.warning(f"[SRP6a] Logon proof rejected for {self.email}")
            Logger.debug("[SRP6a] Rejection reason: MalformedInputError")
            return False, None, None

        return self.verify_proof(
            request.client_public,
            request.client_proof,
            request.second_challenge_client,
        )


def begin_session(store, email: str, second_factor: SecondFactor | None = None):
    """
    Look up the account in `store` and issue a challenge.

    Returns:
        (challenge_bytes, session), or (None, None) for an unknown account.
    """
    credentials = store.get_credentials(email)
    if credentials is None:
        Logger.warning(f"[SRP6a] Unknown account {email}")
        return None, None

    session = SRP6aSession(
        credentials.email,
        credentials.identity_salt,
        credentials.salt,
        credentials.verifier,
        second_factor=second_factor,
    )
    return session.build_challenge(), session
