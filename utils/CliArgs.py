#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import argparse
try:
    import argcomplete
except ImportError:
    argcomplete = None


def build_parser(description: str) -> argparse.ArgumentParser:
    """Common options shared by the account tools."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("email", type=str, help="Account e-mail (login identity)")
    parser.add_argument("-p", "--password", type=str, help="Password (prompted when omitted)")
    parser.add_argument("-c", "--config", type=str, help="Path to config.yaml")
    parser.add_argument("-m", "--memory", action="store_true", help="Use an in-memory account store instead of the database")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging output")
    parser.add_argument("-s", "--silent", action="store_true", help="Run silently (errors only)")
    return parser


def parse_args(description: str = "SRP6a LoginCore", argv=None):
    parser = build_parser(description)

    if argcomplete is not None:
        argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
