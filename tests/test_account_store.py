import unittest

from utils.ConfigLoader import ConfigLoader
from modules.accounts.AccountStore import (
    AccountCredentials,
    InMemoryAccountStore,
    register_account,
)
from modules.accounts.DatabaseConnection import DatabaseAccountStore, DatabaseConnection
from modules.crypto.SRP6aClient import SRP6aClient
from modules.crypto.SRP6aCrypto import SRP6aCrypto
from modules.crypto.SRP6aErrors import MalformedInputError
from modules.crypto.SRP6aSession import begin_session

cfg = ConfigLoader.get_config()
cfg["Logging"]["logging_levels"] = "None"


class TestInMemoryAccountStore(unittest.TestCase):

    def setUp(self) -> None:
        self.store = InMemoryAccountStore()

    def test_register_and_lookup(self) -> None:
        creds = register_account(self.store, "User@Example.com", "Passw0rd!")

        self.assertEqual(creds.email, "user@example.com")
        self.assertEqual(creds.identity_salt, SRP6aCrypto.identity_salt("user@example.com"))
        self.assertEqual(self.store.get_credentials("USER@example.com"), creds)
        self.assertTrue(SRP6aCrypto().check_password(creds.email, "Passw0rd!", creds.salt, creds.verifier))

    def test_password_change_rotates_salt(self) -> None:
        first = register_account(self.store, "user@example.com", "one")
        second = register_account(self.store, "user@example.com", "two")

        self.assertNotEqual(first.salt, second.salt)
        self.assertEqual(self.store.get_credentials("user@example.com"), second)
        self.assertEqual(len(self.store), 1)

    def test_missing_account(self) -> None:
        self.assertIsNone(self.store.get_credentials("nobody@example.com"))

    def test_credentials_validate_widths(self) -> None:
        with self.assertRaises(MalformedInputError):
            AccountCredentials("x", bytes(32), bytes(32), bytes(64))


class TestDatabaseAccountStore(unittest.TestCase):
    """SQLAlchemy store on an in-memory SQLite database."""

    def setUp(self) -> None:
        DatabaseConnection.initialize("sqlite:///:memory:")
        self.store = DatabaseAccountStore()

    def tearDown(self) -> None:
        DatabaseConnection.dispose()

    def test_roundtrip_and_login(self) -> None:
        creds = register_account(self.store, "user@example.com", "Passw0rd!")

        loaded = self.store.get_credentials("user@example.com")
        self.assertEqual(loaded, creds)

        challenge, session = begin_session(self.store, "user@example.com")
        client = SRP6aClient("user@example.com", "Passw0rd!")
        client.load_challenge(challenge)
        ok, _, key = session.verify_message(client.build_proof_request())

        self.assertTrue(ok)
        self.assertEqual(key, client.K)

    def test_update_existing(self) -> None:
        register_account(self.store, "user@example.com", "one")
        second = register_account(self.store, "user@example.com", "two")

        self.assertEqual(self.store.get_credentials("user@example.com").verifier, second.verifier)

    def test_corrupt_row(self) -> None:
        register_account(self.store, "user@example.com", "one")
        account = DatabaseConnection.get_account("user@example.com")
        account.v = "zz"
        DatabaseConnection.auth().commit()

        self.assertIsNone(self.store.get_credentials("user@example.com"))

    def test_not_initialized(self) -> None:
        DatabaseConnection.dispose()
        with self.assertRaises(RuntimeError):
            DatabaseConnection.auth()

    def test_build_url(self) -> None:
        self.assertEqual(
            DatabaseConnection.build_url({"driver": "sqlite", "path": "x.db"}),
            "sqlite:///x.db",
        )
        self.assertEqual(
            DatabaseConnection.build_url({
                "driver": "mysql", "username": "u", "password": "p",
                "host": "h", "port": 3306, "auth_db": "auth",
            }),
            "mysql+pymysql://u:p@h:3306/auth?charset=utf8",
        )
        with self.assertRaises(RuntimeError):
            DatabaseConnection.build_url({"driver": "oracle"})


if __name__ == "__main__":
    unittest.main()
