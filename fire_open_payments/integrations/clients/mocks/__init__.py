"""
Mock integration clients.

These clients return fake (but realistic) responses without calling fire.com.
They are used when:
- sandbox credentials are not available yet
- we want to exercise a checkout end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients must return Ok/Err results like the real client.
"""
