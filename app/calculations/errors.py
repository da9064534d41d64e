"""
Simulation error types.

Structurally invalid input raises one of these. Numeric dead ends inside a
valid simulation (an IRR that will not converge) are reported as None
instead.
"""


class SimulationError(ValueError):
    """Base class for all cash flow simulation failures."""


class InvalidScheduleInput(SimulationError):
    """Malformed arguments to the disbursement scheduler."""


class UnsupportedAssetType(SimulationError):
    """Asset type is not one of apartment, villa or plot."""


class DegenerateSimulation(SimulationError):
    """Tenure, holding period or price leaves nothing to simulate."""
