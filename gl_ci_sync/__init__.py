"""
gl-ci-sync: keep GitLab CI/CD variables and pipelines in step with local configuration.

Three commands, each a fetch-paginate-mutate loop against a single project:

    set-variables         Upsert environment-scoped variables from a JSON file
    remove-env-variables  Delete every variable scoped to an environment
    remove-pipelines      Delete every pipeline, one at a time

Environment:
    GITLAB_TOKEN      - GitLab Personal Access Token (required)
    GITLAB_PROJECT_ID - Project ID or path (required)
    GITLAB_API_URL    - API base URL (default: https://gitlab.com/api/v4)
"""

from gl_ci_sync.cli import main

__version__ = "0.1.0"
__all__ = ["main", "__version__"]
