"""Machine state machine.

Tracks tool engagement and distance mode for one conversion and turns
*requested* state into motion commands, emitting a command only when the
request differs from the tracked state.  Both states start unknown, so the
first request always emits; after that, any number of identical requests
produce nothing.

The machine never emits on its own initiative.  Every command it returns
comes from an explicit setter (or the begin/end sequence accessors) and is
appended to the program by the caller.
"""

from __future__ import annotations

import logging

from svg_motion.configs.settings import MachineConfig
from svg_motion.job_ir.operations import (
    DistanceMode,
    Operation,
    Sequence,
    SetMode,
    ToolOff,
    ToolOn,
)

logger = logging.getLogger(__name__)


class Machine:
    """Minimal-output tool/mode tracker.

    Parameters
    ----------
    config : MachineConfig
        Capability flags and literal sequences.
    """

    def __init__(self, config: MachineConfig) -> None:
        self._cfg = config
        self._tool_engaged: bool | None = None
        self._mode: DistanceMode | None = None

    @property
    def tool_engaged(self) -> bool | None:
        """``None`` until the first :meth:`set_tool`."""
        return self._tool_engaged

    @property
    def mode(self) -> DistanceMode | None:
        return self._mode

    def arc_capable(self) -> bool:
        return self._cfg.supports_circular_interpolation

    def set_tool(self, engaged: bool) -> list[Operation]:
        """Request tool state; returns ``[ToolOn()]``/``[ToolOff()]`` or ``[]``."""
        if self._tool_engaged == engaged:
            return []
        self._tool_engaged = engaged
        return [ToolOn() if engaged else ToolOff()]

    def set_mode(self, mode: DistanceMode) -> list[Operation]:
        """Request distance mode; returns ``[SetMode(mode)]`` or ``[]``."""
        if not isinstance(mode, DistanceMode):
            raise ValueError(f"mode must be a DistanceMode, got {mode!r}")
        if self._mode is mode:
            return []
        self._mode = mode
        return [SetMode(mode)]

    def program_begin(self) -> list[Operation]:
        if self._cfg.begin_sequence:
            return [Sequence(self._cfg.begin_sequence)]
        return []

    def program_end(self) -> list[Operation]:
        if self._cfg.end_sequence:
            return [Sequence(self._cfg.end_sequence)]
        return []
