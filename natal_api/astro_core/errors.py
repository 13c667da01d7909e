"""Error taxonomy for the astro core."""


class AstroCoreError(Exception):
    """Base exception for all astro core errors."""
    pass


class InputError(AstroCoreError, ValueError):
    """Raised when civil date/time components are malformed."""
    pass


class InvalidBodyError(AstroCoreError, ValueError):
    """Raised when a body identifier is not part of the tracked vocabulary."""

    def __init__(self, body):
        self.body = body
        super().__init__(f"Unknown body '{body}'")


class DegenerateGeometryError(AstroCoreError, ValueError):
    """Raised when the requested geometry has no finite solution."""
    pass


class DegenerateLatitudeError(DegenerateGeometryError):
    """Raised when a latitude is too close to a pole for the house calculation."""

    def __init__(self, latitude: float, limit: float):
        self.latitude = latitude
        self.limit = limit
        super().__init__(
            f"Latitude {latitude} is outside the supported band of +/-{limit} degrees"
        )
