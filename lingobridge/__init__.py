"""Top-level package for Lingobridge.

Lingobridge is a small serverless translation endpoint. It forwards user text
to an OpenAI chat model, repairs the JSON reply, and deterministically
normalizes Thai politeness particles. The request entry point is
`lingobridge.endpoint.handler.handler`.
"""

__version__ = "0.12.0"

from .text.particles import normalize_particles

__all__ = ["normalize_particles", "__version__"]
