"""A recursive ray tracer for plain-text scene scripts, writing PPM images."""

__version__ = "0.1.0"