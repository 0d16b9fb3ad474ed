"""
Test suite for the JWT helper.

This package contains:
- unit/: key loading, builder, issuance, verification and config tests
- security/: algorithm-confusion and tampering tests
- integration/: full issue/verify lifecycle tests, including real sleeps
"""
