"""
Integration tests for the token lifecycle.

Issuer and verifier helpers are exercised together, including concurrent
use and one wall-clock expiry scenario.
"""
