from github_finder.api.client import GitHubClient, strip_url_template

__all__ = ["GitHubClient", "strip_url_template"]
