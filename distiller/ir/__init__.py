"""Intermediate Representation (IR) for distilled source files.

The IR normalizes what every language backend produces:
- File structure (packages, imports, classes, interfaces, functions)
- Declarations with visibility, modifiers and type references
- Opaque implementation payloads that are never parsed further
- Partial trees with error markers when a file does not fully parse
"""
