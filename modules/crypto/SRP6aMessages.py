#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Byte-level SRP-6a login messages.

    LogonChallenge     server -> client, cmd 0
        byte accountSalt[32];      static value per account
        byte passwordSalt[32];     static value per account
        byte serverChallenge[128]; B, changes every login
        byte secondChallenge[128]; changes every login

    LogonProofRequest  client -> server, cmd 2 (command byte optional)
        byte A[128];
        byte M1[32];
        byte secondChallengeClient[32];

    LogonProof         server -> client, cmd 3
        byte M2[32];
        byte secondProof[128];     for verifying secondChallenge
"""

from dataclasses import dataclass

from modules.crypto.SRP6aErrors import MalformedInputError
from modules.crypto.SRP6aParameters import HASH_BYTES, MODULUS_BYTES, SALT_BYTES

CMD_LOGON_CHALLENGE = 0
CMD_LOGON_PROOF_REQUEST = 2
CMD_LOGON_PROOF = 3


def _take(data: bytes, offset: int, width: int, name: str) -> tuple[bytes, int]:
    chunk = data[offset:offset + width]
    if len(chunk) != width:
        raise MalformedInputError(f"{name} truncated: expected {width} bytes, got {len(chunk)}")
    return bytes(chunk), offset + width


def _check(value: bytes, width: int, name: str) -> None:
    if not isinstance(value, (bytes, bytearray)) or len(value) != width:
        raise MalformedInputError(f"{name} must be {width} bytes")


@dataclass(frozen=True)
class LogonChallenge:
    account_salt: bytes
    password_salt: bytes
    server_public: bytes
    second_challenge: bytes

    SIZE = 1 + SALT_BYTES + SALT_BYTES + MODULUS_BYTES + MODULUS_BYTES

    def __post_init__(self):
        _check(self.account_salt, HASH_BYTES, "accountSalt")
        _check(self.password_salt, SALT_BYTES, "passwordSalt")
        _check(self.server_public, MODULUS_BYTES, "serverChallenge")
        _check(self.second_challenge, MODULUS_BYTES, "secondChallenge")

    def encode(self) -> bytes:
        return (
            bytes([CMD_LOGON_CHALLENGE])
            + self.account_salt
            + self.password_salt
            + self.server_public
            + self.second_challenge
        )

    @classmethod
    def decode(cls, data: bytes) -> "LogonChallenge":
        if len(data) != cls.SIZE:
            raise MalformedInputError(f"LogonChallenge must be {cls.SIZE} bytes, got {len(data)}")
        if data[0] != CMD_LOGON_CHALLENGE:
            raise MalformedInputError(f"unexpected command {data[0]} for LogonChallenge")

        offset = 1
        account_salt, offset = _take(data, offset, HASH_BYTES, "accountSalt")
        password_salt, offset = _take(data, offset, SALT_BYTES, "passwordSalt")
        server_public, offset = _take(data, offset, MODULUS_BYTES, "serverChallenge")
        second_challenge, offset = _take(data, offset, MODULUS_BYTES, "secondChallenge")
        return cls(account_salt, password_salt, server_public, second_challenge)


@dataclass(frozen=True)
class LogonProofRequest:
    client_public: bytes
    client_proof: bytes
    second_challenge_client: bytes

    SIZE = MODULUS_BYTES + HASH_BYTES + HASH_BYTES

    def __post_init__(self):
        _check(self.client_public, MODULUS_BYTES, "A")
        _check(self.client_proof, HASH_BYTES, "M1")
        _check(self.second_challenge_client, HASH_BYTES, "secondChallengeClient")

    def encode(self) -> bytes:
        return (
            bytes([CMD_LOGON_PROOF_REQUEST])
            + self.client_public
            + self.client_proof
            + self.second_challenge_client
        )

    @classmethod
    def decode(cls, data: bytes) -> "LogonProofRequest":
        """Accepts the bare 192-byte body or the body prefixed by command 2."""
        if len(data) == cls.SIZE + 1:
            if data[0] != CMD_LOGON_PROOF_REQUEST:
                raise MalformedInputError(f"unexpected command {data[0]} for LogonProofRequest")
            data = data[1:]
        elif len(data) != cls.SIZE:
            raise MalformedInputError(f"LogonProofRequest must be {cls.SIZE} bytes, got {len(data)}")

        offset = 0
        client_public, offset = _take(data, offset, MODULUS_BYTES, "A")
        client_proof, offset = _take(data, offset, HASH_BYTES, "M1")
        second, offset = _take(data, offset, HASH_BYTES, "secondChallengeClient")
        return cls(client_public, client_proof, second)


@dataclass(frozen=True)
class LogonProof:
    server_proof: bytes
    second_proof: bytes

    SIZE = 1 + HASH_BYTES + MODULUS_BYTES

    def __post_init__(self):
        _check(self.server_proof, HASH_BYTES, "M2")
        _check(self.second_proof, MODULUS_BYTES, "secondProof")

    def encode(self) -> bytes:
        return bytes([CMD_LOGON_PROOF]) + self.server_proof + self.second_proof

    @classmethod
    def decode(cls, data: bytes) -> "LogonProof":
        if len(data) != cls.SIZE:
            raise MalformedInputError(f"LogonProof must be {cls.SIZE} bytes, got {len(data)}")
        if data[0] != CMD_LOGON_PROOF:
            raise MalformedInputError(f"unexpected command {data[0]} for LogonProof")

        offset = 1
        server_proof, offset = _take(data, offset, HASH_BYTES, "M2")
        second_proof, offset = _take(data, offset, MODULUS_BYTES, "secondProof")
        return cls(server_proof, second_proof)
