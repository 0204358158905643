"""Guardrail derivation errors.

Every failure raised by the derivation engine is a precondition or
contract violation detected at construction time. None of them are
recoverable by substituting a default: a miscomputed clinical bound is
a patient-safety defect, so callers must let these propagate.
"""


class GuardrailError(Exception):
    """Base exception for guardrail derivation failures."""

    pass


class EmptyInputListError(GuardrailError):
    """A device-supported value list is empty (after filtering)."""

    pass


class NoMatchingDiscreteValueError(GuardrailError):
    """No supported discrete value lies at or below the requested target."""

    pass


class GuardrailInvariantError(GuardrailError, ValueError):
    """Recommended bounds or starting suggestion fall outside absolute bounds."""

    pass


class UnknownParameterError(GuardrailError, KeyError):
    """The requested parameter has no static guardrail."""

    pass


class IncompatibleUnitsError(GuardrailError, TypeError):
    """Quantities of different physical dimensions were compared or converted."""

    pass


class EmptyRangeError(GuardrailError, ValueError):
    """A closed range was built with its lower bound above its upper bound."""

    pass


class InvalidSettingError(GuardrailError, ValueError):
    """A configured setting cannot feed a derivation (e.g. a zero carb ratio)."""

    pass
