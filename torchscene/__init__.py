"""Scene, editor camera, environment and post-process logic for a deferred 3D renderer."""

__version__ = "0.1.0"