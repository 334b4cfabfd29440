"""
Core engine: syntax trees, documents and the rule pipeline.
"""
