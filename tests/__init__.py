"""
zksubmit Test Suite
===================

Test organization:
- tests/unit/          - Unit tests (no toolchain, no network, no real sleeps)

Run tests:
    pytest                          # All tests
    pytest tests/unit -k relayer    # Relayer client only
    pytest --cov=zksubmit           # With coverage
"""
