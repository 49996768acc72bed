"""Scoring module for the trust score engine.

Pure calculators, no I/O:
  component scorers → fraud penalty → behavioral distance
  → risk / team-fit / hiring-confidence / profile-strength composites
"""
