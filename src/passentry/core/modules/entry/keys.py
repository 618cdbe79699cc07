"""Entry key generation and link building."""

import secrets
import string
from urllib.parse import urlencode

KEY_ALPHABET = string.ascii_letters + string.digits


def generate_entry_key(length: int) -> str:
    """Return a random URL-safe key drawn from the CSPRNG."""
    if length < 1:
        raise ValueError("Entry key length must be positive")
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(length))


def build_entry_url(base_url: str, key: str, key_parameter: str, controller_parameter: str) -> str:
    """Build the redemption link, e.g. https://host/entry?ple_key=<key>&ple=true.

    Existing query parameters on base_url are preserved.
    """
    separator = "&" if "?" in base_url else "?"
    query = urlencode({key_parameter: key, controller_parameter: "true"})
    return f"{base_url}{separator}{query}"
