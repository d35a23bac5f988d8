from app.domains.access.resolver import (
    AccessVerdict, Capability, Capabilities, AccessDecision,
    resolve_verdict, capabilities_for, resolve_access, anonymous_read_decision
)

__all__ = [
    "AccessVerdict", "Capability", "Capabilities", "AccessDecision",
    "resolve_verdict", "capabilities_for", "resolve_access", "anonymous_read_decision"
]
