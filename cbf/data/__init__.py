"""
Data layer consumed by the scoring core.

Responsibilities:
- Define the Rating record and the sparse tag-vector shape.
- Declare the rating source and tag vector store interfaces.
- Provide in-memory and CSV-backed implementations of both.
"""
