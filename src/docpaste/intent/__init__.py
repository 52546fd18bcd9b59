"""Instruction classification for docpaste."""

from docpaste.intent.classifier import IntentClassifier

__all__ = ["IntentClassifier"]
