"""Exceptions raised by the parameter store and the kinematic evaluator."""
from __future__ import annotations


class ParameterError(ValueError):
    """Base class for rejected parameter edits and undefined kinematics."""


class UnknownParameter(ParameterError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown parameter: {name!r}")
        self.name = name


class InvalidParameterValue(ParameterError):
    def __init__(self, name: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid value for {name}: {value!r} ({reason})")
        self.name = name
        self.value = value
        self.reason = reason


class InvalidParameters(ParameterError):
    """Derived quantity undefined for the current parameter set."""


__all__ = [
    "InvalidParameterValue",
    "InvalidParameters",
    "ParameterError",
    "UnknownParameter",
]
