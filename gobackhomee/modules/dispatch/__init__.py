"""
Dispatch Module - Black Box Interface

Purpose: Send one authenticated request and decode its response
Interface: Dispatcher.send(), Dispatcher.sign_in()
Hidden: httpx client, canonical JSON encoding, error classification
"""

from .dispatcher import SIGN_IN_PATH, Dispatcher, encode_body

__all__ = ["Dispatcher", "SIGN_IN_PATH", "encode_body"]
