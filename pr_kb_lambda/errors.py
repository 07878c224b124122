class ClientInputError(Exception):
    """Raised when the request body cannot be decoded."""
    status_code = 400


class UpstreamFailure(Exception):
    """Raised when the generation or storage call fails."""
    status_code = 500

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(str(cause))
