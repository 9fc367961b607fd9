"""File outputs: summaries and 3D views."""
