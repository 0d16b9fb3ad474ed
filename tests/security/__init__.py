"""
Security tests for the verifier.

Covers algorithm-confusion attacks and token tampering.
"""
