"""core/auth.py — Shared-secret admin check.

There are no sessions or tokens: the configured admin password is the only
credential, compared on POST /admin/login and, when write protection is
enabled, against the X-Admin-Password header on mutating routes.
"""

from __future__ import annotations

import secrets

ADMIN_PASSWORD_HEADER = "X-Admin-Password"


def passwords_match(submitted: str, secret: str) -> bool:
    """Constant-time equality so response timing does not leak the secret's prefix."""
    return secrets.compare_digest(submitted.encode("utf-8"), secret.encode("utf-8"))
