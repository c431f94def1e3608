class QuizError(Exception):
    pass


class InvalidInput(QuizError):
    """An operation was attempted while its precondition does not hold."""


class FetchError(QuizError):
    """The question source could not produce a well-formed question."""
