#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import threading

from Crypto.Random import get_random_bytes


class SecureRandom:
    """
    Process-wide cryptographically secure random source.

    One instance is shared by every login session. Bytes come from the
    operating system entropy pool through pycryptodome.
    """

    _instance = None
    _instance_lock = threading.Lock()

    def __new__(cls):
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = super(SecureRandom, cls).__new__(cls)
                cls._instance._lock = threading.Lock()
        return cls._instance

    def random_bytes(self, count: int) -> bytes:
        """Return `count` random bytes."""
        if count <= 0:
            raise ValueError("count must be positive")
        with self._lock:
            return get_random_bytes(count)

    def random_int(self, count: int) -> int:
        """Random non-negative integer built from `count` little-endian bytes."""
        return int.from_bytes(self.random_bytes(count), "little")


def get_random() -> SecureRandom:
    return SecureRandom()
