"""
Integrations layer.
This package contains all code used to communicate with fire.com:
- contracts/: enums, dataclasses and the Ok/Err result type
- policy/: normalisation of gateway responses
- clients/: real HTTP and mock clients
- webhooks/: decoding of webhook tokens posted by fire.com

Switching implementations:
Host applications pick FireAPI or MockFireAPI in one place; both expose the same methods.
"""
