"""Exception taxonomy for rating, aggregation, and tier-list operations."""

from __future__ import annotations

from collections.abc import Iterable


class TierRatingError(Exception):
    """Base exception with an optional suggestion for the caller."""

    category = "Error"

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[{self.category}] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class ConfigurationError(TierRatingError):
    """Error when the level, threshold, or bucket configuration is invalid."""

    category = "Configuration Error"


class ValidationError(TierRatingError):
    """Error when caller input is rejected at the boundary."""

    category = "Validation Error"


class UnknownLevelError(ValidationError):
    """Error when a level key is not in the registry."""

    def __init__(self, key: str, known: Iterable[str] = ()) -> None:
        self.key = key
        known = list(known)
        suggestion = f"Use one of: {', '.join(known)}" if known else None
        super().__init__(f"Unknown level key '{key}'", suggestion)


class MissingFieldError(ValidationError):
    """Error when a mandatory field is missing or empty."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field '{field}'")


class UnknownBucketError(ValidationError):
    """Error when a tier-list bucket key is not configured."""

    def __init__(self, key: str, known: Iterable[str] = ()) -> None:
        self.key = key
        known = list(known)
        suggestion = f"Use one of: {', '.join(known)}" if known else None
        super().__init__(f"Unknown bucket '{key}'", suggestion)


class DuplicateItemError(ValidationError):
    """Error when an item reference would appear in more than one bucket."""

    def __init__(self, item_ref: str) -> None:
        self.item_ref = item_ref
        super().__init__(f"Item '{item_ref}' appears in more than one bucket")


class NotFoundError(TierRatingError):
    """Error when a rating, tier list, or pending item does not exist."""

    category = "Not Found"

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} '{identifier}' not found")


class ConflictLostError(TierRatingError):
    """Error when a concurrent upsert for the same rater and content won the race."""

    category = "Conflict"

    def __init__(self, content_id: str, rater_id: str) -> None:
        self.content_id = content_id
        self.rater_id = rater_id
        super().__init__(
            f"Concurrent rating by '{rater_id}' for '{content_id}' was committed first",
            "Reload the stored rating and retry if this submission should win.",
        )


class InvalidLevelReferenceError(TierRatingError):
    """Error when a stored rating carries a level key missing from the registry."""

    category = "Data Integrity Error"

    def __init__(self, content_id: str, rating_id: str, key: str) -> None:
        self.content_id = content_id
        self.rating_id = rating_id
        self.key = key
        super().__init__(
            f"Rating '{rating_id}' for '{content_id}' references unknown level '{key}'",
            "Restore the level in the registry configuration or migrate the stored ratings.",
        )
