class BookingValidationError(Exception):
    """Bad or missing booking input; carries [{field, message}] errors."""

    def __init__(self, errors, message="Validation failed"):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ReservationConflict(Exception):
    """Requested range overlaps active reservations of the same product."""

    def __init__(self, conflicts, at_commit=False):
        super().__init__("Requested dates are not available")
        self.conflicts = conflicts
        self.at_commit = at_commit


class DeliveryRejected(Exception):
    """Delivery address outside the radius, or unverified without acknowledgment."""

    def __init__(self, check, code):
        super().__init__(check.message)
        self.check = check
        self.code = code


class ReservationPersistenceError(Exception):
    pass


class InvalidTransition(Exception):
    def __init__(self, current, requested):
        super().__init__(f"Cannot change status from {current} to {requested}")
        self.current = current
        self.requested = requested
