"""Exceptions raised by splice operations."""


class InvalidArgumentError(ValueError):
    """Raised when an operation argument is outside the stream.

    Raised before any I/O takes place, so the stream is left untouched.

    Attributes:
        argument -- name of the offending parameter
        value -- the rejected value
        message -- explanation of the error
    """

    def __init__(self, message, argument=None, value=None):
        self.argument = argument
        self.value = value
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        if self.argument is not None:
            return f"{self.message} ({self.argument}={self.value!r})"
        return self.message


class ArgumentRangeError(InvalidArgumentError):
    """Raised when a size or distance argument is not positive."""
