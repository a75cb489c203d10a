"""Version of the gitsemver package itself.

Format: MAJOR.MINOR.PATCH, bumped manually for releases.
"""

__version__ = "1.0.0"
