"""trimesh conversion and mesh checks."""
