"""
kybalion-path: a Hermetic self-responsibility course with a deterministic
practice engine.
"""

__version__ = "1.0.0"
