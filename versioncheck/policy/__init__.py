"""Scheduling policy — check interval clock and cluster authority."""

from .authority import ClusterAuthority, is_authorized, resolve_authority
from .clock import CheckPolicy, DueDecision, DueKind, is_check_due
