class NotFoundError(ValueError):
    """Requested record does not exist (404)"""

    status_code = 404


class ConflictError(ValueError):
    """Record clashes with an existing one (409)"""

    status_code = 409


class PermissionDeniedError(ValueError):
    """Caller may not perform the operation (403)"""

    status_code = 403
