"""
Contracts (data models).

Request/response shapes shared by the real HTTP client, the mock client and the
webhook decoder, so callers rely on stable models rather than ad-hoc dicts.
"""
