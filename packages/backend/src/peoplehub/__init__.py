"""PeopleHub — multi-tenant HR platform backend.

The identity and access core: login, password reset, invitation-based
company activation, and the role/tenant gate in front of every HR
feature (users, employees, service managers).
"""

__version__ = "0.1.0"
