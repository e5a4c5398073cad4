"""Error taxonomy for the seeded draw engine."""


class DrawError(Exception):
    """Base class for every error raised by the draw package."""


class EmptyPoolError(DrawError):
    """Raised when a match is requested from an engine with no teams left."""


class NoFeasiblePairingError(DrawError):
    """Raised when the drawn second seeded team has no admissible opponent left.

    The current draw attempt cannot be completed. The engine does not retry:
    callers that want a complete draw build a fresh engine and start again.
    """

    def __init__(self, team_name: str, match_index: int):
        self.team_name = team_name
        self.match_index = match_index
        super().__init__(
            f"No feasible opponent for '{team_name}' at match {match_index}"
        )


class InvalidDrawInputError(DrawError, ValueError):
    """Raised when the pools handed to the engine are malformed."""


class InfeasibleDrawError(InvalidDrawInputError):
    """Raised when well-formed pools admit no complete pairing at all."""
