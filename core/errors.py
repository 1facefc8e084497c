"""Errors raised by the layout engine"""


class LayoutError(Exception):
    """Base class for layout failures surfaced to the caller"""
    pass


class InvalidLayerRangeError(LayoutError):
    """Raised when a layer's time range is negative or empty"""

    def __init__(self, layer_id: str, start: float, end: float):
        self.layer_id = layer_id
        self.start = start
        self.end = end
        super().__init__(
            f"Layer '{layer_id}' has an invalid time range "
            f"[{start}s-{end}s]: start must be >= 0 and end > start"
        )


class DuplicateLayerIdError(LayoutError):
    """Raised when two layers in the same timeline share an id"""

    def __init__(self, layer_id: str):
        self.layer_id = layer_id
        super().__init__(f"Duplicate layer id '{layer_id}'")


class UnknownTransitionError(LayoutError):
    """Raised when a transition effect id is not registered"""

    def __init__(self, effect_id: str):
        self.effect_id = effect_id
        super().__init__(f"Transition effect '{effect_id}' is not registered")
