"""Batch text-to-speech driver for the VOICEPEAK engine."""
