"""Release deployment: extract, fix up, activate and prune releases."""

from .errors import DeployError
from .model import DeployReport, PruneReport, ReleaseEntry, ReleaseName, ShortId, release_name
from .service import DeployRequest, deploy, deploy_lock, request_from_config

__all__ = [
    "DeployError",
    "DeployReport",
    "DeployRequest",
    "PruneReport",
    "ReleaseEntry",
    "ReleaseName",
    "ShortId",
    "deploy",
    "deploy_lock",
    "release_name",
    "request_from_config",
]
