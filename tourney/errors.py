class EngineValidationError(ValueError):
    """Raised when an engine operation is handed input it cannot work with.

    ``location`` points at the offending part of the input, e.g.
    ``"phase:groups"``, ``"group:A"`` or ``"team_count"``.
    """

    def __init__(self, message, location=None):
        super().__init__(message)
        self.message = message
        self.location = location

    def to_dict(self):
        return {"error": self.message, "location": self.location}
