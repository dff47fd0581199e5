from gitmulti.errors import GitMultiError


class DiscoveryError(GitMultiError):
    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Failed to walk {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause
