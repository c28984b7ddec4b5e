class ScopeError(Exception):
    """
    Missing or mismatched entity (tenant) identifier.

    Always fatal and always raised before any write takes place.
    """
    pass
