"""
Status Normalizer - Maps free-form status text to a canonical status
"""

from typing import Optional

AVAILABLE = "available"
FULL = "full"
WAITLIST = "waitlist"
UNKNOWN = "unknown"


def normalize_status(text: Optional[str]) -> str:
    """
    Normalize a raw status label

    Matching is by substring, in priority order: "full" beats "wait",
    which beats "open"/"available". Anything else is returned as-is
    (trimmed and lowercased), so unseen labels still round-trip.

    Args:
        text: Raw label scraped from the page, may be None

    Returns:
        Canonical status string, never empty

    Example:
        >>> normalize_status("FULL - waitlist open")
        'full'
        >>> normalize_status("  Spots Open ")
        'available'
    """
    value = (text or "").strip().lower()
    if not value:
        return UNKNOWN
    if "full" in value:
        return FULL
    if "wait" in value:
        return WAITLIST
    if "open" in value or "available" in value:
        return AVAILABLE
    return value


if __name__ == '__main__':
    samples = ["Full", "Waitlist only", "Open", "", "   ", "Cancelled", "FULL - waitlist open"]

    print("Testing status normalization...")
    for sample in samples:
        print(f"  {sample!r:>26} -> {normalize_status(sample)}")

    assert normalize_status("FULL - waitlist open") == FULL, "full should win over waitlist"
    assert normalize_status("") == UNKNOWN, "empty should be unknown"

    print("\n✅ Status normalizer tests passed!")
