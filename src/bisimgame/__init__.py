"""Bisimulation games between labelled transition systems.

An Attacker tries to show two processes behave differently; a Defender
tries to match every move.  Automated players use the level marking of the
game's dependency graph to play optimally when they can win.
"""

__version__ = "0.1.0"
