class NotFoundError(Exception):
    """Base exception for missing stored entities."""
    pass

class CatchNotFoundError(NotFoundError):
    pass

class LocationNotFoundError(NotFoundError):
    pass

class EquipmentNotFoundError(NotFoundError):
    pass

class UserNotFoundError(NotFoundError):
    pass

class ConflictError(Exception):
    """Raised when a client-chosen id already belongs to another user."""
    pass

class CatchConflictError(ConflictError):
    pass

class UserEquipmentConflictError(ConflictError):
    pass
