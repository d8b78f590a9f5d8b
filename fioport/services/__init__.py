"""Pipeline services for the release builder.

Each service performs one step (dependencies, build, strip, packaging) and
returns a Result; ReleaseBuilder in release.py chains them.
"""

from fioport.services.release import ReleaseArtifact, ReleaseBuilder
from fioport.services.release_errors import ReleaseError, Step
from fioport.services.versions import select_latest_tag

__all__ = [
    "ReleaseArtifact",
    "ReleaseBuilder",
    "ReleaseError",
    "Step",
    "select_latest_tag",
]
