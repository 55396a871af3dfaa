"""
NonFungibleCareer Test Suite
============================

Test organization:
- tests/unit/       - Library tests (snarkjs replaced by tests.fakes.FakeSnarkjs)
- tests/services/   - HTTP service tests through httpx ASGITransport

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
"""
