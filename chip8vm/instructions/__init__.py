"""CHIP-8 instruction handlers, one per decoded operation."""
