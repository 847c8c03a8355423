"""Detect whether the process runs inside a CI environment."""

import os
from collections.abc import Mapping

# Generic markers first, then the providers that do not set CI.
CI_VARIABLES = (
    "CI",
    "CONTINUOUS_INTEGRATION",
    "BUILD_NUMBER",
    "RUN_ID",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "TF_BUILD",
    "BITBUCKET_BUILD_NUMBER",
)


def is_ci(environ: Mapping[str, str] | None = None) -> bool:
    """Return True when a known CI environment variable is set.

    Args:
        environ: Environment to inspect, defaults to ``os.environ``

    Returns:
        Whether the environment looks like a CI run

    """
    env = os.environ if environ is None else environ
    for name in CI_VARIABLES:
        value = env.get(name)
        if value and value.lower() not in {"0", "false"}:
            return True
    return False
