"""Admin service connector — version check protocol client."""

from .client import AdminClient
from .models import (
    Acknowledged,
    AdminSession,
    CheckAction,
    CheckResponse,
    StatusReport,
    UpdateRecord,
)
