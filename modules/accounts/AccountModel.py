#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


# -------------------------------------------------------
# ACCOUNT TABLE (SRP-6a credentials, hex strings)
# -------------------------------------------------------
class Account(Base):
    __tablename__ = "account"

    id = Column(Integer, primary_key=True, autoincrement=True)

    email = Column(String(255), unique=True, nullable=False)

    # SHA-256(email), 32 bytes
    identity_salt = Column(String(64), nullable=False)
    # password salt, 32 bytes
    s = Column(String(64), nullable=False)
    # verifier, 128 bytes little-endian
    v = Column(String(256), nullable=False)

    joindate = Column(DateTime, nullable=False, default=_utcnow)
    updated = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)
