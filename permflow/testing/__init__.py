"""
Test doubles for permflow.

- FakeOS: simulated permission state and dialog behind a real coordinator
- FakePermissionFlow: canned outcomes for code that consumes permflow
"""

from .fake_flow import FakePermissionFlow, status_for
from .fake_os import ALLOW, DENY, DENY_DONT_ASK, DialogResponse, FakeOS, LaunchRecord

__all__ = [
    "ALLOW",
    "DENY",
    "DENY_DONT_ASK",
    "DialogResponse",
    "FakeOS",
    "FakePermissionFlow",
    "LaunchRecord",
    "status_for",
]
