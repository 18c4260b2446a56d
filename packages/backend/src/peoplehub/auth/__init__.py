"""Authentication and authorization.

Learn: Three pieces, leaves first:
1. password.py → bcrypt hashing (only ever called by CredentialStore)
2. tokens.py → signed session tokens (JWT) + opaque single-use tokens
3. policy.py + dependencies.py → role/tenant gate in front of every route

A verified session token resolves to a Principal (id, role, company),
and every protected operation is decided from that Principal alone.
"""
