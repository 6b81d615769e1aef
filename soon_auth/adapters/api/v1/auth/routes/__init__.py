"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "sign_up",
    "sign_in",
    "sign_out",
    "password",
    "account",
    "me",
    "activity",
    "oauth",
]
