class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class DeliveryFailed(DomainError):
    """The passcode could not be handed over to the outbound channel."""

    pass
