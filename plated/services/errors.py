class ServiceError(Exception):
    kind = "Internal"


class UnsupportedPlatformError(ServiceError):
    kind = "UnsupportedPlatform"


class UnauthenticatedError(ServiceError):
    kind = "Unauthenticated"

    def __init__(self, message: str = "Please sign in to continue"):
        super().__init__(message)


class InvalidArgumentError(ServiceError):
    kind = "InvalidArgument"


class NotFoundError(ServiceError):
    kind = "NotFound"

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} not found: {resource_id}")
        self.resource = resource
        self.resource_id = resource_id


class GenerationError(ServiceError):
    """Base for failures that reach the caller as a generic retry prompt."""


class ModelUnavailableError(GenerationError):
    kind = "ModelUnavailable"


class RateLimitedError(ModelUnavailableError):
    pass


class EmptyResponseError(GenerationError):
    kind = "EmptyResponse"

    def __init__(self, message: str = "Model response did not include text content"):
        super().__init__(message)


class MalformedOutputError(GenerationError):
    kind = "MalformedOutput"


class PersistenceFailureError(ServiceError):
    kind = "PersistenceFailure"

    def __init__(self, operation: str, reason: str):
        super().__init__(f"Recipe store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class FunctionNotFoundError(NotFoundError):
    def __init__(self, name: str):
        super().__init__("Function", name)
        self.name = name
