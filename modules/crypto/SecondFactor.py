#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Auxiliary "second challenge / second proof" fields of the logon messages.

The login protocol reserves a 128-byte secondChallenge in LogonChallenge and
a 128-byte secondProof in LogonProof. Their algorithm is not part of SRP-6a,
so the session delegates both to a strategy object.
"""

from utils.ConfigLoader import ConfigLoader
from modules.crypto.SRP6aParameters import MODULUS_BYTES


class SecondFactor:
    """Base strategy. Subclasses must return exactly 128 bytes from both hooks."""

    name = "base"

    def challenge(self, session) -> bytes:
        raise NotImplementedError

    def proof(self, session, client_value: bytes) -> bytes:
        raise NotImplementedError


class NoSecondFactor(SecondFactor):
    """Fills both fields with zeros."""

    name = "none"

    def challenge(self, session) -> bytes:
        return bytes(MODULUS_BYTES)

    def proof(self, session, client_value: bytes) -> bytes:
        return bytes(MODULUS_BYTES)


class StaticSecondFactor(SecondFactor):
    """
    Fixed byte strings older clients expect in the auxiliary fields.
    They are not derived from session state and prove nothing.
    """

    name = "static"

    CHALLENGE = bytes.fromhex(
        "5BE8F195543C1ED2A22D8488B060A394236865D500EC62929582EBA631EBF50E"
        "FD1E148E9C559C624B3172E82ED4C25D0A96F1A5FDE804DABE23729709A6B292"
        "D367FFD820C5CBC8F48D16D7D012F848D105AE03BA58499C8AB756AAC8FB185E"
        "7E4E1B2CD04CDAA3B752DD8914E21E73A3985D5A41E801DA90CD619D6EDD4168"
    )

    PROOF = bytes.fromhex(
        "7D95740CAD32171CBA7502B3A5D1005A5A4C323CD63A94F255DB051E95307DC2"
        "69B86490E279CAD75D8D77517EC729B70301B362C46DEA4FF5446E9C056F2C04"
        "CA9632772129B883E0133B5C9982087B63BF0DDAB77763B4D1EF6460635ABBDF"
        "5CA51CC360CE8FD6C41555BB6D99D226741B4F2EE4425CB584444060A7DD5218"
    )

    def challenge(self, session) -> bytes:
        return self.CHALLENGE

    def proof(self, session, client_value: bytes) -> bytes:
        return self.PROOF


SECOND_FACTORS = {
    NoSecondFactor.name: NoSecondFactor,
    StaticSecondFactor.name: StaticSecondFactor,
}


def get_second_factor(name: str | None = None) -> SecondFactor:
    """
    Build the strategy named in crypto.second_factor (or `name`).

    Raises:
        RuntimeError: on an unknown strategy name.
    """
    if name is None:
        name = ConfigLoader.get_config().get("crypto", {}).get("second_factor", "none")

    try:
        return SECOND_FACTORS[str(name).lower()]()
    except KeyError:
        raise RuntimeError(f"Unknown second factor strategy: {name}")
