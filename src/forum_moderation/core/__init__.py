"""Core configuration, authorization and error primitives."""
