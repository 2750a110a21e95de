"""CHIP-8 instruction handlers grouped by family."""
