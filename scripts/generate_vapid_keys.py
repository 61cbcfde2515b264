#!/usr/bin/env python3
"""Generate a VAPID key pair for web push notifications.

Run once and copy the printed lines into your .env file. The public key is
safe to share with client websites; keep the private key secret.

Usage:
    python scripts/generate_vapid_keys.py [--email admin@example.com]
"""

import argparse
from datetime import UTC, datetime

from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid
from py_vapid.utils import b64urlencode


def generate_vapid_keys() -> tuple[str, str]:
    """Return (public_key, private_key) as base64url strings.

    The public key is the uncompressed P-256 point browsers expect as
    ``applicationServerKey``; the private key is the raw 32-byte scalar.
    """
    vapid = Vapid()
    vapid.generate_keys()

    public_bytes = vapid.public_key.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )
    private_bytes = vapid.private_key.private_numbers().private_value.to_bytes(32, "big")
    return b64urlencode(public_bytes), b64urlencode(private_bytes)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", default="admin@example.com", help="VAPID contact email")
    args = parser.parse_args()

    public_key, private_key = generate_vapid_keys()

    print(f"# VAPID keys for web push notifications, generated {datetime.now(UTC).isoformat()}")
    print(f"VAPID_PUBLIC_KEY={public_key}")
    print(f"VAPID_PRIVATE_KEY={private_key}")
    print(f"VAPID_EMAIL={args.email}")


if __name__ == "__main__":
    main()
