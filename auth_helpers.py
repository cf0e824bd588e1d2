"""Server-only auth helpers.

Only the CLI imports this module. Keep it out of templates and views.
"""

import base64
import secrets


def generate_auth_secret():
    """Return 32 random bytes, base64 encoded, for use as SECRET_KEY."""
    return base64.b64encode(secrets.token_bytes(32)).decode("ascii")
