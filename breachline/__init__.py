"""
Breachline - Intruder vs Defender card game engine

A deterministic, rules-driven engine for a two-sided card game played
against a rule-based Defender automa. The engine provides:
- State management with integrity checking
- Phase and turn sequencing
- Action validation and combat resolution
- A deterministic bot policy for the Defender
- Snapshots and save files
"""

__version__ = "0.1.0"
