class SpecError(RuntimeError):
    """
    Raised when a parser is built from help text that does not follow the
    expected layout, or whose option lines cannot be classified.
    """


class ParserExit(SystemExit):
    """
    Raised when parsing has to end the program, e.g. after `--help`.

    Left uncaught it terminates the process with `code` as exit status.
    """

    def __init__(self, code: int = 0):
        super().__init__(code)


class OptionError(ParserExit):
    """
    Raised after an option error has been reported on standard error.
    """

    msg: str

    def __init__(self, msg: str):
        super().__init__(2)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg
