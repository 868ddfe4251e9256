"""Identity helpers used to stamp ``created_by`` and stage history ``by`` fields."""

ANONYMOUS_ACTOR = 'anonymous'


def current_actor_id(user) -> str:
    """Return the id of the authenticated user, or ``'anonymous'``."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return ANONYMOUS_ACTOR
    return str(user.pk)
