"""
Core business logic for swim workout logging.

This module is framework-agnostic - it doesn't import FastAPI or touch
storage. The parser in particular is a pure function of its input, so it
can be tested in isolation and reused by any caller.
"""
