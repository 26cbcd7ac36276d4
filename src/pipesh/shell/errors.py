class ShellError(RuntimeError):
    pass


class ShellSyntaxError(ShellError):
    pass


class LaunchError(ShellError):
    """The executable could not be started.
    """
    pass
