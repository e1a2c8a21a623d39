#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from sqlalchemy import create_engine, select
from sqlalchemy.orm import scoped_session, sessionmaker

from utils.ConfigLoader import ConfigLoader
from utils.Logger import Logger
from modules.accounts.AccountModel import Account, Base
from modules.accounts.AccountStore import AccountCredentials, AccountStore
from modules.crypto.SRP6aCrypto import SRP6aCrypto
from modules.crypto.SRP6aErrors import MalformedInputError


class DatabaseConnection:
    """Handles the auth-db connection holding SRP credentials."""

    _auth_engine = None
    _auth_session = None

    @staticmethod
    def build_url(db: dict) -> str:
        driver = db.get("driver", "sqlite")

        if driver == "sqlite":
            return f"sqlite:///{db.get('path', ':memory:')}"

        if driver == "mysql":
            auth_db_name = db.get("auth_db")
            if not auth_db_name:
                raise RuntimeError("Database name for auth DB is missing (auth_db).")
            return (
                f"mysql+pymysql://{db['username']}:{db['password']}@"
                f"{db['host']}:{db['port']}/{auth_db_name}?charset=utf8"
            )

        raise RuntimeError(f"Unsupported database driver: {driver}")

    @staticmethod
    def initialize(url: str | None = None):
        """Initialize the auth DB connection and create the account table."""
        if url is None:
            config = ConfigLoader.get_config()
            url = DatabaseConnection.build_url(config["database"])

        DatabaseConnection._auth_engine = create_engine(url, pool_pre_ping=True)
        DatabaseConnection._auth_session = scoped_session(
            sessionmaker(bind=DatabaseConnection._auth_engine, autoflush=False)
        )
        Base.metadata.create_all(DatabaseConnection._auth_engine)

        Logger.info(f"Database initialized ({DatabaseConnection._auth_engine.url.get_backend_name()})")

    @staticmethod
    def dispose():
        if DatabaseConnection._auth_session is not None:
            DatabaseConnection._auth_session.remove()
        if DatabaseConnection._auth_engine is not None:
            DatabaseConnection._auth_engine.dispose()
        DatabaseConnection._auth_session = None
        DatabaseConnection._auth_engine = None

    # AUTH DB SESSION
    @staticmethod
    def auth():
        if DatabaseConnection._auth_session is None:
            raise RuntimeError("DatabaseConnection.initialize() not called.")
        return DatabaseConnection._auth_session

    # AUTH QUERIES
    @staticmethod
    def get_account(email: str):
        session = DatabaseConnection.auth()
        return session.execute(
            select(Account).where(Account.email == email)
        ).scalar_one_or_none()


class DatabaseAccountStore(AccountStore):
    """AccountStore on top of the SQLAlchemy account table."""

    def get_credentials(self, email: str) -> AccountCredentials | None:
        key = self.normalize(email)
        account = DatabaseConnection.get_account(key)
        if account is None:
            return None

        try:
            return AccountCredentials(
                email=account.email,
                identity_salt=bytes.fromhex(account.identity_salt),
                salt=bytes.fromhex(account.s),
                verifier=bytes.fromhex(account.v),
            )
        except (ValueError, MalformedInputError) as exc:
            Logger.error(f"[DB] Invalid SRP data for {key}: {exc}")
            return None

    def set_credentials(self, email: str, salt: bytes, verifier: bytes) -> AccountCredentials:
        key = self.normalize(email)
        credentials = AccountCredentials(
            email=key,
            identity_salt=SRP6aCrypto.identity_salt(key),
            salt=bytes(salt),
            verifier=bytes(verifier),
        )

        session = DatabaseConnection.auth()
        account = DatabaseConnection.get_account(key)
        if account is None:
            account = Account(email=key)
            session.add(account)
            Logger.success(f"[DB] Created account {key}")
        else:
            Logger.success(f"[DB] Updated account {key}")

        account.identity_salt = credentials.identity_salt.hex()
        account.s = credentials.salt.hex()
        account.v = credentials.verifier.hex()
        session.commit()

        return credentials
