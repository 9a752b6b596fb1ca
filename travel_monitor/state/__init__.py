"""
State machine module.

Models, events and pure transition logic for the travel region monitor
lifecycle: DISABLED → AWAITING_PERMISSIONS → MONITORING ⇄ DEGRADED.
"""
