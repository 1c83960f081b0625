"""Composite authenticity scoring engine.

Dispatches a piece of user-generated content to a set of independent detector
agents and reduces their outputs into one composite score, a verdict and an
auditable evidence chain.
"""

__version__ = "0.1.0"
