"""
wotscore.identity — Issuer keypairs that produce attestation events.

Scoring never checks signatures (admission happens at the transport
boundary); this module exists so issuers, fixtures and tools can mint
well-formed, signed kind-1985 events.

An issuer key file holds the private key and the label namespace the issuer
attests in:

    {"pubkey": "<hex>", "seckey": "<hex>", "namespace": "ai.wot"}
"""

import json
import os
import time
from typing import Optional

from nacl.signing import SigningKey
from nacl.encoding import HexEncoder

from .attestation import ATTESTATION_KIND, build_tags, event_id
from .config import DEFAULT_NAMESPACE


class IssuerIdentity:
    """Ed25519 keypair for an attestation issuer, bound to one label namespace."""

    def __init__(self, signing_key: Optional[SigningKey] = None,
                 namespace: str = DEFAULT_NAMESPACE):
        self.signing_key = signing_key or SigningKey.generate()
        self.namespace = namespace

    @property
    def public_key_hex(self) -> str:
        return self.signing_key.verify_key.encode(encoder=HexEncoder).decode()

    def attest(self, subject: str, attestation_type: str, content: str = "",
               created_at: Optional[int] = None,
               namespace: Optional[str] = None) -> dict:
        """Create a signed attestation event about ``subject``.

        The signature covers the raw 32-byte event id, as relays expect.
        """
        created_at = int(time.time()) if created_at is None else int(created_at)
        tags = build_tags(subject, attestation_type, namespace or self.namespace)
        att_id = event_id(self.public_key_hex, created_at, ATTESTATION_KIND, tags, content)
        return {
            "id": att_id,
            "pubkey": self.public_key_hex,
            "created_at": created_at,
            "kind": ATTESTATION_KIND,
            "tags": tags,
            "content": content,
            "sig": self.signing_key.sign(bytes.fromhex(att_id)).signature.hex(),
        }

    def to_key_record(self) -> dict:
        return {
            "pubkey": self.public_key_hex,
            "seckey": self.signing_key.encode(encoder=HexEncoder).decode(),
            "namespace": self.namespace,
        }

    @classmethod
    def from_key_record(cls, record: dict) -> "IssuerIdentity":
        """Rebuild an issuer from ``to_key_record`` output.

        Raises ValueError if the stored pubkey does not match the secret key.
        """
        sk = SigningKey(record["seckey"].encode(), encoder=HexEncoder)
        issuer = cls(signing_key=sk, namespace=record.get("namespace") or DEFAULT_NAMESPACE)
        pubkey = record.get("pubkey")
        if pubkey and pubkey != issuer.public_key_hex:
            raise ValueError("key record pubkey does not match its secret key")
        return issuer

    @classmethod
    def load(cls, filepath: str) -> "IssuerIdentity":
        with open(filepath) as f:
            return cls.from_key_record(json.load(f))

    def save(self, filepath: str):
        """Write the key record; the file is readable by the owner only."""
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
        with open(filepath, "w") as f:
            json.dump(self.to_key_record(), f, indent=2)
        os.chmod(filepath, 0o600)

    def __repr__(self):
        return f"IssuerIdentity({self.public_key_hex[:16]}…, {self.namespace})"
