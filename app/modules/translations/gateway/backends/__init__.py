"""Translator backends. Modules here register themselves on import."""
