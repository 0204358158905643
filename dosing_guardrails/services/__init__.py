# Settings review services
from dosing_guardrails.services.guardrail_review import derive_guardrails

__all__ = [
    "derive_guardrails",
]
