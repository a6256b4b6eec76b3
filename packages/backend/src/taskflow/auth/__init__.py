"""Authentication and authorization.

Learn: One authentication path and one authorization rule:
1. Users → email/password → a single signed JWT (no refresh token)
2. Every task access → owner_id must equal the token's subject

The token is verified statelessly: signature + expiry, nothing stored
server-side. The ownership check answers 404 for foreign tasks so a
caller can't probe which task ids exist.
"""
