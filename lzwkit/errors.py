class LZWError(Exception):
    pass


class UnsupportedLitWidthError(LZWError, ValueError):
    def __init__(self, lit_width):
        super().__init__("lzw: unsupported litWidth: {}".format(lit_width))
        self.lit_width = lit_width


class UnexpectedEndOfDataError(LZWError, EOFError):
    # decode() fills in the bytes that were recovered before the truncation
    partial = b""


class InvalidCodeError(LZWError):
    pass


class MissingClearCodeError(InvalidCodeError):
    pass


class LiteralTooLargeError(LZWError, ValueError):
    pass


class ClosedError(LZWError, ValueError):
    pass
