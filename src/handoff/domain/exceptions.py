"""Domain exceptions."""


class HandoffError(Exception):
    """Base exception for Handoff."""

    pass


class NotFound(HandoffError):
    """Requested resource was not found."""

    def __init__(self, resource: str, identifier: object) -> None:
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


class ValidationError(HandoffError):
    """Validation failed for input data."""

    pass


class InvalidState(HandoffError):
    """Delivery is in a state that does not accept the requested operation."""

    pass


class ArtifactAlreadyExists(HandoffError):
    """An artifact is already stored at the requested path."""

    def __init__(self, namespace: str, path: str) -> None:
        super().__init__(f"Artifact already exists: {namespace}/{path}")
        self.namespace = namespace
        self.path = path


class ArtifactNotFound(HandoffError):
    """No artifact is stored at the requested path."""

    def __init__(self, namespace: str, path: str) -> None:
        super().__init__(f"Artifact not found: {namespace}/{path}")
        self.namespace = namespace
        self.path = path


class CompositionError(HandoffError):
    """Original document or signature image could not be composed."""

    pass


class LockLost(HandoffError):
    """Finalization lock no longer belongs to this attempt."""

    pass


class TokenRejected(HandoffError):
    """Access token is unknown, revoked or expired."""

    def __init__(self, status: str) -> None:
        super().__init__(f"Access token rejected: {status}")
        self.status = status
