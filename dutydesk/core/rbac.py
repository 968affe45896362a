from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    HIGH_COMMAND = "HIGH_COMMAND"
    STAFF = "STAFF"


ROLE_PERMISSIONS: dict[Role, set[str]] = {
    Role.ADMIN: {
        "applications:read",
        "applications:submit",
        "applications:decide",
        "tickets:read",
        "tickets:open",
        "tickets:close",
        "duty:read",
        "duty:manage",
        "activity:view",
        "submissions:read",
        "submissions:write",
        "audit:view",
    },
    # high command reviews applications and activity, as on the chat side
    Role.HIGH_COMMAND: {
        "applications:read",
        "applications:submit",
        "applications:decide",
        "tickets:read",
        "duty:read",
        "activity:view",
        "submissions:read",
        "submissions:write",
    },
    Role.STAFF: {
        "tickets:read",
        "tickets:open",
        "tickets:close",
        "duty:read",
    },
}


def has_permission(role: Role, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, set())
