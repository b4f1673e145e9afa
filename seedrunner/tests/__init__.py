"""
Test suite for the randomized runner.

Focus areas:
- Seed derivation determinism
- Candidate expansion and display names
- Hook ordering across hierarchy levels
- Scheduler lifecycle and failure isolation
"""
