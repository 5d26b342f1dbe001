class QuizError(Exception):
    """Base exception for quiz commands. Always recoverable at the prompt."""


class MissingParameter(QuizError):
    """Raised when a command needs an <id> and none was given."""

    def __init__(self, name="id"):
        super().__init__(f"Missing parameter <{name}>.")


class NotANumber(QuizError):
    """Raised when the <id> parameter is not an integer."""

    def __init__(self, raw):
        self.raw = raw
        super().__init__(f"The value of parameter <id> is not a number: '{raw}'.")


class NotFound(QuizError):
    """Raised when no quiz is stored under the given id."""

    def __init__(self, quiz_id):
        self.quiz_id = quiz_id
        super().__init__(f"There is no quiz with id={quiz_id}.")


class ValidationError(QuizError):
    """Raised when a quiz question or answer is blank."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("The quiz is invalid: " + " ".join(self.errors))
