"""
Hatch judging engine: phase-scoped scoring, leaderboards and elimination
for hackathons.
"""
__version__ = "1.0.0"
