"""Event type constants.

Learn: Centralizing event types as constants prevents typos and
makes it easy to discover every audited identity change.
"""

# ─── Tenants ─────────────────────────────────────────────

COMPANY_CREATED = "company.created"
COMPANY_ACTIVATED = "company.activated"
COMPANY_STATUS_CHANGED = "company.status_changed"

# ─── Users ───────────────────────────────────────────────

USER_CREATED = "user.created"
USER_STATUS_CHANGED = "user.status_changed"
USER_PASSWORD_CHANGED = "user.password_changed"

# ─── Password reset ──────────────────────────────────────

PASSWORD_RESET_REQUESTED = "password_reset.requested"
PASSWORD_RESET_COMPLETED = "password_reset.completed"

# ─── Leave requests ──────────────────────────────────────

LEAVE_REQUESTED = "leave.requested"
LEAVE_DECIDED = "leave.decided"
