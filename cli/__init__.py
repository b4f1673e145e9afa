"""
Seedrunner CLI - Reproduction tooling for randomized test runs

Commands:
- seedrunner seed parse - Decode a seed chain
- seedrunner seed strip - Strip seeds from a candidate display name
- seedrunner seed plan - Show the candidates and seeds a run would produce
"""

__version__ = "0.1.0"
