class ExternalServiceFailure(Exception):
    """
    An external identity/notification service could not be reached or
    answered unexpectedly. Never fatal to the engine: callers convert it to
    a failed result and log it.
    """
    pass
