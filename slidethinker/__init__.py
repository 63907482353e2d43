"""
SlideThinker - Multi-Agent Presentation Generation

A thinking loop that plans, drafts, critiques and refines structured
presentations by orchestrating chat-completion calls to a language model.
"""

__version__ = "1.0.0"
__author__ = "SlideThinker Team"
