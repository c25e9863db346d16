"""
Exceptions raised by the path emulation engine.

Packet loss inside the emulated network is never reported through these;
it is an ordinary outcome of ``PathModel.put``.
"""


class EmulationError(Exception):
    """Base class for all path emulation errors."""


class InvalidProfileError(EmulationError, ValueError):
    """The requested severity profile is not in the catalog."""


class InvalidSpeedPatternError(EmulationError, ValueError):
    """The requested speed pattern id is not in the catalog."""


class InvalidParameterError(EmulationError, ValueError):
    """A construction argument is out of range."""


class DepartureOrderError(EmulationError, ValueError):
    """A packet departs before the model's current impairment window."""


class QueueCapacityError(EmulationError):
    """The delivery queue cannot accept another packet."""


class PayloadTooLargeError(EmulationError):
    """The packet at the head of the queue does not fit the caller's limit."""


class ModelClosedError(EmulationError):
    """The path model has already been closed."""
