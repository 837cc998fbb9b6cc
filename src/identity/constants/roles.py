"""Role names and the external login providers known to the service."""

MEMBER = "Member"
ADMIN = "Admin"
SUPER_ADMIN = "SuperAdmin"

DEFAULT_ROLE = MEMBER

GOOGLE_PROVIDER = "Google"
