#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Local SRP-6a handshake simulator.

Runs both sides of a login in-process: server session from the account
store, client from SRP6aClient. Useful to check that a stored verifier
and a password still agree.

    python -m tools.clientSimulator user@example.com -p Passw0rd!
    python -m tools.clientSimulator user@example.com -p Passw0rd! --memory
"""

import getpass
import sys

from utils.CliArgs import parse_args
from utils.ConfigLoader import ConfigLoader
from utils.Logger import Logger
from modules.accounts.AccountStore import register_account
from modules.crypto.SRP6aClient import SRP6aClient
from modules.crypto.SRP6aErrors import SRP6aError
from modules.crypto.SRP6aSession import begin_session
from tools.createUser import open_store


class ClientSimulator:
    def __init__(self, store, email: str, password: str):
        self.store = store
        self.email = email
        self.password = password
        self.session_key_hex = None

    def run(self) -> bool:
        challenge, session = begin_session(self.store, self.email)
        if session is None:
            Logger.error(f"[CLIENT] Account {self.email} not found")
            return False

        Logger.info(f"[CLIENT] <- LogonChallenge ({len(challenge)} bytes)")

        client = SRP6aClient(self.email, self.password)
        try:
            client.load_challenge(challenge)
            request = client.build_proof_request()
        except SRP6aError as exc:
            Logger.error(f"[CLIENT] Invalid challenge: {exc}")
            return False

        Logger.info(f"[CLIENT] -> LogonProofRequest ({len(request)} bytes)")

        ok, proof, session_key = session.verify_message(request)
        if not ok:
            Logger.error("[CLIENT] Server rejected the proof")
            return False

        Logger.info(f"[CLIENT] <- LogonProof ({len(proof)} bytes)")

        if not client.verify_server_proof(proof):
            Logger.error("[CLIENT] Server proof M2 mismatch")
            return False

        if client.K != session_key:
            Logger.error("[CLIENT] Session keys differ")
            return False

        self.session_key_hex = client.K.hex()
        Logger.success(f"[CLIENT] Authenticated as {self.email}")
        return True


def main(argv=None) -> int:
    args = parse_args("Simulate an SRP-6a login against the account store", argv)

    if args.config:
        ConfigLoader.reload_config(args.config)
    if args.verbose:
        Logger.set_level("All")
    if args.silent:
        Logger.set_level("Error")

    password = args.password or getpass.getpass("Password: ")
    store = open_store(args)

    if args.memory:
        register_account(store, args.email, password)

    return 0 if ClientSimulator(store, args.email, password).run() else 1


if __name__ == "__main__":
    sys.exit(main())
