#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Account store contract consumed by the login core.

The store owns the long-lived credential record (identity salt, password
salt, verifier). The login core only reads it to open a session, and only
writes it through register_account() at registration / password change.
"""

import threading
from dataclasses import dataclass

from modules.crypto.SRP6aCrypto import SRP6aCrypto
from modules.crypto.SRP6aParameters import HASH_BYTES, MODULUS_BYTES, SALT_BYTES
from utils.Logger import Logger


@dataclass(frozen=True)
class AccountCredentials:
    email: str
    identity_salt: bytes
    salt: bytes
    verifier: bytes

    def __post_init__(self):
        SRP6aCrypto.require_width(self.identity_salt, HASH_BYTES, "identity salt")
        SRP6aCrypto.require_width(self.salt, SALT_BYTES, "salt")
        SRP6aCrypto.require_width(self.verifier, MODULUS_BYTES, "verifier")


class AccountStore:
    """Base contract. Lookups are by e-mail, case-insensitive."""

    @staticmethod
    def normalize(email: str) -> str:
        return email.strip().lower()

    def get_credentials(self, email: str) -> AccountCredentials | None:
        raise NotImplementedError

    def set_credentials(self, email: str, salt: bytes, verifier: bytes) -> AccountCredentials:
        raise NotImplementedError


class InMemoryAccountStore(AccountStore):
    """Dict-backed store for tests and the local client simulator."""

    def __init__(self):
        self._accounts: dict[str, AccountCredentials] = {}
        self._lock = threading.Lock()

    def get_credentials(self, email: str) -> AccountCredentials | None:
        with self._lock:
            return self._accounts.get(self.normalize(email))

    def set_credentials(self, email: str, salt: bytes, verifier: bytes) -> AccountCredentials:
        key = self.normalize(email)
        credentials = AccountCredentials(
            email=key,
            identity_salt=SRP6aCrypto.identity_salt(key),
            salt=bytes(salt),
            verifier=bytes(verifier),
        )
        with self._lock:
            self._accounts[key] = credentials
        return credentials

    def __len__(self):
        return len(self._accounts)


def register_account(store: AccountStore, email: str, password: str) -> AccountCredentials:
    """
    Create or replace the SRP credentials of an account.

    A new salt is drawn on every call, so a password change also rotates
    the salt. The password itself is never handed to the store.
    """
    email = AccountStore.normalize(email)
    salt, verifier = SRP6aCrypto().make_registration(email, password)
    credentials = store.set_credentials(email, salt, verifier)

    Logger.info(f"[ACCOUNT] Stored SRP credentials for {email}")
    return credentials
