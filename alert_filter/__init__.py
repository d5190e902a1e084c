"""LLM alert filter: triage log alerts with a language model and learn from feedback."""

__version__ = "0.1.0"
