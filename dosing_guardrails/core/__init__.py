"""Quantity model and guardrail derivation engine."""
