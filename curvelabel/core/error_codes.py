"""
Structured warning codes for placement results.
Use these keys in LabelingResult.warnings; map to user-facing messages in callers.
"""

# Known warning keys (returned in LabelingResult.warnings)
NO_MASTER_SPINE = "no_master_spine"
NO_FEASIBLE_CANDIDATE = "no_feasible_candidate"
FALLBACK_COLLISIONS = "fallback_collisions"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    NO_MASTER_SPINE: "Could not trace a centerline through the river. Check the polygon outline.",
    NO_FEASIBLE_CANDIDATE: "No curved placement fits inside the river; a straight label was placed at its visual center.",
    FALLBACK_COLLISIONS: "The straight fallback label touches the river banks. Try a smaller font size.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given warning key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
