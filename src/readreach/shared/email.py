"""Email normalization shared by identity verification and user lookup."""


def normalize_email(value: str | None) -> str:
    """Return the canonical form used for storage and comparison."""
    return (value or "").strip().lower()


def same_email(left: str | None, right: str | None) -> bool:
    return bool(left) and bool(right) and normalize_email(left) == normalize_email(right)
