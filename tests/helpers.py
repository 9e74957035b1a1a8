"""Assertion helpers shared by the test modules."""


def codes(result) -> list:
    """Violation codes of a validate() result, empty when it passed."""
    return [] if result is None else result.types
