"""glstack: stacked merge requests for GitLab."""
