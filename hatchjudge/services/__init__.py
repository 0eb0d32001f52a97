"""
Judging services: persistence, locking, scoring, leaderboards,
elimination and submission intake.
"""
