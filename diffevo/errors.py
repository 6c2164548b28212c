"""Exceptions raised by diffevo."""


# base classes


class DiffEvoError(Exception):
    """Base class for errors raised by diffevo"""


# errors


class ConfigurationError(ValueError, DiffEvoError):
    """Invalid bounds, population size or control parameters.

    Raised at construction time, so an optimizer never exists in an
    invalid state.
    """


class AskTellOrderError(RuntimeError, DiffEvoError):
    """ask()/tell() called out of order"""
