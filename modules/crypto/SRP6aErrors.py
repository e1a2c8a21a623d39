#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Errors raised by the SRP-6a login core."""


class SRP6aError(Exception):
    """Base class for every SRP-6a failure."""


class AuthenticationRejected(SRP6aError):
    """Client proof M1 does not match the server's recomputed value."""


class MalformedInputError(SRP6aError):
    """A byte string has the wrong width for its protocol field."""


class DegenerateValueError(SRP6aError):
    """Client public value A (or the scrambler u) would make S predictable."""


class SessionStateError(SRP6aError):
    """A login session was used out of order or after it finished."""
