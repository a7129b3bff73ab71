"""Pygame user interface for the CHIP-8 emulator."""
