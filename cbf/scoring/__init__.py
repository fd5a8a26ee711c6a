"""
Content-based item scoring.

Responsibilities:
- Build the user's profile through the configured profile builder.
- Compare it to each candidate's tag vector by cosine similarity.
- Leave out candidates with no comparable score and report why.
- Rank scored candidates for top-N recommendation.
"""
