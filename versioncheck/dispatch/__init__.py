"""Dispatch — per-invocation state machine tying policy to the admin client."""

from .controller import (
    DispatchController,
    Mode,
    Outcome,
    Step,
    next_step,
    render_update,
)
