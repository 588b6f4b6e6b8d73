"""Capability policy — the one place that decides who may do what.

Both the API services and the client's view selection (via
``GET /api/auth/me``) consult this table instead of comparing role strings.
"""
import enum
from typing import Optional

from eventdesk.models.user import Role


class Action(str, enum.Enum):
    create_event = "create_event"
    list_all_events = "list_all_events"
    edit_event = "edit_event"
    delete_event = "delete_event"
    invite = "invite"
    notify_attendees = "notify_attendees"
    view_invitations = "view_invitations"
    delete_discussion = "delete_discussion"
    view_statistics = "view_statistics"
    manage_users = "manage_users"


# Roles allowed to perform each action at all.
_ROLE_ACTIONS: dict[Role, frozenset[Action]] = {
    Role.admin: frozenset(Action),
    Role.organizer: frozenset({
        Action.create_event,
        Action.edit_event,
        Action.delete_event,
        Action.invite,
        Action.notify_attendees,
        Action.view_invitations,
        Action.delete_discussion,
    }),
    Role.attendee: frozenset(),
}

# Actions that additionally require the caller to own the resource (admins bypass).
_OWNER_SCOPED: frozenset[Action] = frozenset({
    Action.edit_event,
    Action.delete_event,
    Action.invite,
    Action.notify_attendees,
    Action.view_invitations,
    Action.delete_discussion,
})


def can_perform(
    role: Role | str,
    action: Action,
    resource_owner_id: Optional[str] = None,
    caller_id: Optional[str] = None,
) -> bool:
    """Return True if ``role`` may perform ``action`` on the given resource."""
    try:
        role = Role(role)
    except ValueError:
        return False
    if action not in _ROLE_ACTIONS[role]:
        return False
    if role == Role.admin or action not in _OWNER_SCOPED:
        return True
    return resource_owner_id is not None and resource_owner_id == caller_id


def capabilities(role: Role | str) -> list[str]:
    """Actions the role may perform on resources it owns, sorted by name."""
    try:
        role = Role(role)
    except ValueError:
        return []
    return sorted(action.value for action in _ROLE_ACTIONS[role])
