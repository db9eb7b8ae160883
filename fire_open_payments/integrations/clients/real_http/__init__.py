"""
Real HTTP integration clients.

These clients talk to fire.com over HTTPS:
- accesstokens.py: nonce + hashed client key exchanged for a bearer token
- fire.py: payment requests, payment status and account transactions

Important:
- Must expose the same methods as the mock client in clients/mocks/fire.py
- Must return Ok/Err results from integrations/contracts/results.py
"""
