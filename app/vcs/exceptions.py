class GitHubAPIError(Exception):
	"""Raised when the GitHub REST API answers with an error or cannot be reached."""

	def __init__(self, message: str, status_code: int | None = None) -> None:
		super().__init__(message)
		self.status_code = status_code
