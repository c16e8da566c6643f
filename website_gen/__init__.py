"""
Website Generation from Natural-Language Descriptions

A pipeline that asks a hosted LLM for a small website, splits the reply into
HTML, CSS and JavaScript, and composes a sandboxed preview of the result.
"""

__version__ = "0.1.0"
