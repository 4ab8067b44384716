# -*- coding: utf-8 -*-


class PomodoroError(ValueError):
    """Base for every rejected operation. State is left untouched."""


class InvalidConfig(PomodoroError):
    pass


class EmptyInput(PomodoroError):
    pass


class NotFound(PomodoroError):
    pass
