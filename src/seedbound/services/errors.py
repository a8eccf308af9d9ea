"""Service-layer exceptions."""


class IllegalPhaseError(Exception):
    """Raised when a combat action is attempted outside its legal phase."""


class UnknownActionError(Exception):
    """Raised when a combat action type is not recognised."""


class FactoryError(Exception):
    """Raised when a runtime entity cannot be created."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""
