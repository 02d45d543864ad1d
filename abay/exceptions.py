"""Error taxonomy shared by the answer pipeline and its collaborators."""


class AbayError(Exception):
    """Base class for all application errors."""


class NotReadyError(AbayError):
    """Embedding state is not initialized or the provider is unavailable."""


class BackendError(AbayError):
    """The generative backend failed to produce an answer."""


class BackendTimeoutError(BackendError):
    """The generative backend did not answer within the timeout."""


class BackendTransportError(BackendError):
    """The request to the generative backend failed in transport."""


class BackendMalformedResponseError(BackendError):
    """The generative backend answered without usable content."""


class StorageError(AbayError):
    """Base class for conversation store failures."""


class StorageReadError(StorageError):
    """Reading the turn log failed."""


class ConversationNotFoundError(StorageError):
    """The referenced conversation does not exist."""


class LastConversationError(StorageError):
    """A user's only remaining conversation cannot be deleted."""
