"""
Shell errors

Every failure that aborts a single input line is a ShellError. The read-eval
loop catches them, reports them and re-prompts; none of them stops the shell.

    ShellError
    ├── ParseError
    │   ├── MalformedPipeline
    │   ├── MalformedRedirect
    │   └── MalformedQuote
    ├── ResolutionError
    │   └── CommandNotFound
    ├── LaunchError
    │   ├── RedirectFailed
    │   ├── ForkFailed
    │   └── ExecFailed
    └── BuiltinError
        └── BuiltinInPipeline
"""


class ShellError(Exception):
    """
    Base class for per-line shell errors.

    Attributes:
        message: Human-readable description
        text: The offending piece of input (token, path or command name)
        status: Exit status recorded for the failed line
    """

    status = 1

    def __init__(self, message, text=None):
        super().__init__(message)
        self.message = message
        self.text = text

    def __str__(self):
        if self.text is None:
            return self.message
        return f"{self.message}: {self.text}"


# ---------- Parsing ----------
class ParseError(ShellError):
    status = 2


class MalformedPipeline(ParseError):
    """A pipe with a missing producer or consumer stage."""


class MalformedRedirect(ParseError):
    """A redirect operator with no usable target."""


class MalformedQuote(ParseError):
    """A quoted token that never closes."""


# ---------- Resolution ----------
class ResolutionError(ShellError):
    status = 127


class CommandNotFound(ResolutionError):
    def __init__(self, name):
        super().__init__("command not found", name)
        self.name = name


# ---------- Launch ----------
class LaunchError(ShellError):
    status = 126


class RedirectFailed(LaunchError):
    status = 1

    def __init__(self, path, reason=None):
        message = "cannot redirect"
        if reason:
            message = f"cannot redirect ({reason})"
        super().__init__(message, path)
        self.path = path


class ForkFailed(LaunchError):
    pass


class ExecFailed(LaunchError):
    pass


# ---------- Builtins ----------
class BuiltinError(ShellError):
    status = 2


class BuiltinInPipeline(BuiltinError):
    def __init__(self, name):
        super().__init__("builtin cannot be used in a pipeline", name)
        self.name = name
