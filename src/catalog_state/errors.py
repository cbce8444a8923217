# src/catalog_state/errors.py

"""Exceptions raised by the catalog state engine."""


class InvalidCommandError(ValueError):
    """A command was rejected before it could mutate any state.

    Raised for caller contract violations such as a non-positive cart
    quantity, an unknown sort key or a criteria field that does not exist.
    """
