#!/usr/bin/env python3
"""wotscore quickstart — direct and propagated trust for one agent.

Run:  python3 examples/quickstart.py
"""
import asyncio
import json
import logging

from wotscore import IssuerIdentity, MemoryAttestationStore, TrustWalker

logging.basicConfig(level=logging.INFO)

# 1. Three issuers, each with its own keypair
alice = IssuerIdentity()
bob = IssuerIdentity()
carol = IssuerIdentity()

print(f"👤 Alice: {alice.public_key_hex[:16]}…")
print(f"👤 Bob:   {bob.public_key_hex[:16]}…")
print(f"👤 Carol: {carol.public_key_hex[:16]}…")

# 2. Carol vouches for Alice, Alice vouches for Bob, Bob vouches for himself
store = MemoryAttestationStore()
store.add_event(carol.attest(alice.public_key_hex, "general-trust", "Known for months"))
store.add_event(alice.attest(bob.public_key_hex, "service-quality", "Delivered on time"))
store.add_event(bob.attest(bob.public_key_hex, "service-quality", "Trust me"))

# 3. Score Bob with and without issuer trust propagation
walker = TrustWalker(store)
for depth in (0, 1, 2):
    result = asyncio.run(walker.score_identity(bob.public_key_hex, depth=depth))
    print(f"\n📊 depth={depth}")
    print(json.dumps(result.to_dict(), indent=2))
