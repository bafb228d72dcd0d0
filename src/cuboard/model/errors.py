"""Error kinds raised by the typing pipeline."""


class InvalidTurnError(ValueError):
    """A turn with an unknown face or a zero magnitude.

    Raised at the boundary, before the turn reaches the reducer.
    """


class KeymapError(ValueError):
    """A keymap file or keymap entry that cannot be interpreted."""


class RetractUnderflowError(RuntimeError):
    """A retraction was issued against an empty committed buffer.

    This is an internal invariant violation and is fatal to the session.
    """
