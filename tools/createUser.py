#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Register an account or change its password.

    python -m tools.createUser user@example.com -p Passw0rd!

Generates a fresh salt and verifier and stores them in the auth database
(or an in-memory store with --memory). The password is never stored.
"""

import getpass
import sys

from utils.CliArgs import parse_args
from utils.ConfigLoader import ConfigLoader
from utils.Logger import Logger
from modules.accounts.AccountStore import InMemoryAccountStore, register_account


def open_store(args):
    if args.memory:
        return InMemoryAccountStore()

    from modules.accounts.DatabaseConnection import DatabaseAccountStore, DatabaseConnection

    DatabaseConnection.initialize()
    return DatabaseAccountStore()


def main(argv=None) -> int:
    args = parse_args("Create or update an SRP-6a account", argv)

    if args.config:
        ConfigLoader.reload_config(args.config)
    if args.verbose:
        Logger.set_level("All")
    if args.silent:
        Logger.set_level("Error")

    password = args.password or getpass.getpass("Password: ")
    if not password:
        Logger.error("Password must not be empty")
        return 1

    store = open_store(args)
    credentials = register_account(store, args.email, password)

    Logger.success(f"User '{credentials.email}' created/updated.")
    Logger.success(f"Identity salt: {credentials.identity_salt.hex()}")
    Logger.success(f"Salt: {credentials.salt.hex()}")
    Logger.success(f"Verifier: {credentials.verifier.hex()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
