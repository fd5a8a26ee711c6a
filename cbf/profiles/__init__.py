"""
User profile builders.

Responsibilities:
- Turn a user's full rating history into one sparse tag-affinity vector.
- Offer two aggregation policies: threshold ("liked" items only) and
  mean-centered weighted (relative preference).
- Skip rated items that have no tag vector instead of failing the build.
"""
