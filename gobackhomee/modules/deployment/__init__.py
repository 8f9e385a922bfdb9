"""
Deployment Module - Black Box Interface

Purpose: Observe deployment lifecycle from the client side
Interface: parse_status(), StatusTracker, poll_deployment()
Hidden: Transition table
"""

from .status import StatusTracker, can_transition, parse_status, poll_deployment

__all__ = ["StatusTracker", "can_transition", "parse_status", "poll_deployment"]
