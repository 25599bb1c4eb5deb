import io
import logging

import numpy

from .bitstreamer import Order, make_bit_reader, make_bit_writer
from .errors import (
    ClosedError,
    InvalidCodeError,
    LiteralTooLargeError,
    MissingClearCodeError,
    UnexpectedEndOfDataError,
    UnsupportedLitWidthError,
)

__all__ = ["Order", "Decoder", "Encoder", "encode", "decode",
           "MAX_WIDTH", "MAX_CODE", "MIN_LIT_WIDTH", "MAX_LIT_WIDTH"]

logger = logging.getLogger(__name__)

MAX_WIDTH = 12
MAX_CODE = (1 << MAX_WIDTH) - 1
MIN_LIT_WIDTH = 2
MAX_LIT_WIDTH = 8


def _check_lit_width(lit_width):
    if not MIN_LIT_WIDTH <= lit_width <= MAX_LIT_WIDTH:
        raise UnsupportedLitWidthError(lit_width)
    return lit_width


class Decoder:
    """Reads LZW compressed data from ``source`` and yields the original bytes.

    ``source`` is any object with a ``read(n)`` method returning bytes.
    Bytes decoded before a failure are handed out first; the error is raised
    by the following ``read`` call.
    """

    def __init__(self, source, order, lit_width, require_clear=False):
        self.__prefix = None
        self.__suffix = None
        self.reset(source, order, lit_width, require_clear)

    def reset(self, source, order, lit_width, require_clear=False):
        self.__lit_width = _check_lit_width(lit_width)
        self.__bit_reader = make_bit_reader(order, source)
        self.order = Order(order)
        self.require_clear = require_clear
        self.__clear = 1 << lit_width
        self.__eof = self.__clear + 1
        if self.__prefix is None:
            self.__prefix = numpy.zeros(MAX_CODE + 1, dtype=numpy.uint16)
            self.__suffix = numpy.zeros(MAX_CODE + 1, dtype=numpy.uint8)
        self.__output = bytearray()
        self.__error = None
        self.__is_end = False
        self.__is_first = True
        self.__closed = False
        self.__reset_table()

    def __reset_table(self):
        # codes below the clear code are literals and never stored
        self.__width = self.__lit_width + 1
        self.__hi = self.__eof + 1
        self.__last = None
        self.__is_full = False

    @property
    def hi(self):
        return self.__hi

    @property
    def width(self):
        return self.__width

    def __expand(self, code):
        sequence = bytearray()
        while self.__clear <= code:
            sequence.append(int(self.__suffix[code]))
            code = int(self.__prefix[code])
        sequence.append(code)
        sequence.reverse()
        return sequence

    def __decode_code(self):
        code = self.__bit_reader.read(self.__width)
        if self.__is_first:
            self.__is_first = False
            if self.require_clear and code != self.__clear:
                raise MissingClearCodeError(
                    "lzw: stream does not start with a clear code (got {})".format(code))

        if code < self.__clear:
            sequence = bytearray((code,))
        elif code == self.__clear:
            logger.debug("clear code at hi=%d width=%d", self.__hi, self.__width)
            self.__reset_table()
            return
        elif code == self.__eof:
            self.__is_end = True
            return
        elif code < self.__hi or (code == self.__hi and self.__is_full):
            sequence = self.__expand(code)
        elif code == self.__hi and self.__last is not None:
            # KwKwK: the code refers to the entry about to be created
            sequence = self.__expand(self.__last)
            sequence.append(sequence[0])
        else:
            raise InvalidCodeError(
                "lzw: invalid code {} (hi={}, width={})".format(code, self.__hi, self.__width))

        self.__output += sequence
        if self.__last is not None and not self.__is_full:
            self.__prefix[self.__hi] = self.__last
            self.__suffix[self.__hi] = sequence[0]
            if self.__hi == MAX_CODE:
                # hi stays at the ceiling, the table is frozen until the next clear
                self.__is_full = True
                logger.debug("code table full, width=%d", self.__width)
            else:
                self.__hi += 1
                if self.__hi == 1 << self.__width:
                    self.__width += 1
                    logger.debug("code width grows to %d at hi=%d", self.__width, self.__hi)
        self.__last = code

    def read(self, size=-1):
        if self.__closed:
            raise ClosedError("lzw: reader is closed")
        while size < 0 or len(self.__output) < size:
            if self.__is_end or self.__error is not None:
                break
            try:
                self.__decode_code()
            except (UnexpectedEndOfDataError, InvalidCodeError) as e:
                self.__error = e

        if size < 0 or len(self.__output) < size:
            size = len(self.__output)
        data = bytes(self.__output[:size])
        del self.__output[:size]
        if not data and self.__error is not None:
            raise self.__error
        return data

    def close(self):
        self.__closed = True
        self.__output = bytearray()
        self.__prefix = None
        self.__suffix = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class Encoder:
    """Compresses bytes written to it and sends the codes to ``sink``.

    ``close`` must be called to emit the end-of-data code and the final
    partial byte.
    """

    def __init__(self, sink, order, lit_width):
        self.reset(sink, order, lit_width)

    def reset(self, sink, order, lit_width):
        self.__lit_width = _check_lit_width(lit_width)
        self.__bit_writer = make_bit_writer(order, sink)
        self.order = Order(order)
        self.__clear = 1 << lit_width
        self.__eof = self.__clear + 1
        self.__saved_code = None
        self.__closed = False
        self.__reset_table()

    def __reset_table(self):
        self.__width = self.__lit_width + 1
        self.__hi = self.__eof + 1
        self.__table = {}

    @property
    def hi(self):
        return self.__hi

    @property
    def width(self):
        return self.__width

    def __assign_code(self):
        # every emitted code claims hi, matching the decoder one code later
        hi = self.__hi
        if hi == 1 << self.__width:
            self.__width += 1
        if hi == MAX_CODE:
            logger.debug("out of codes, emitting clear code")
            self.__bit_writer.write(self.__clear, self.__width)
            self.__reset_table()
            return None
        self.__hi = hi + 1
        return hi

    def write(self, data):
        if self.__closed:
            raise ClosedError("lzw: writer is closed")
        if isinstance(data, (bytes, bytearray, memoryview)):
            values = numpy.frombuffer(data, dtype=numpy.uint8)
        else:
            values = numpy.asarray(data, dtype=numpy.uint8).ravel()
        if len(values) == 0:
            return 0
        max_literal = (1 << self.__lit_width) - 1
        if self.__lit_width < 8 and numpy.any(values > max_literal):
            raise LiteralTooLargeError("lzw: input byte too large for the litWidth")

        count = len(values)
        values = values.tolist()
        code = self.__saved_code
        if code is None:
            self.__bit_writer.write(self.__clear, self.__width)
            code = values[0]
            values = values[1:]

        for literal in values:
            key = (code << 8) | literal
            matched = self.__table.get(key)
            if matched is not None:
                code = matched
                continue
            self.__bit_writer.write(code, self.__width)
            code = literal
            assigned = self.__assign_code()
            if assigned is not None:
                self.__table[key] = assigned

        self.__saved_code = code
        return count

    def close(self):
        if self.__closed:
            return
        self.__closed = True
        if self.__saved_code is not None:
            self.__bit_writer.write(self.__saved_code, self.__width)
            self.__assign_code()
        else:
            self.__bit_writer.write(self.__clear, self.__width)
        self.__bit_writer.write(self.__eof, self.__width)
        self.__bit_writer.flush()
        self.__table = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def encode(values, order=Order.LSB, lit_width=8):
    sink = io.BytesIO()
    with Encoder(sink, order, lit_width) as encoder:
        encoder.write(values)
    return sink.getvalue()


def decode(data, order=Order.LSB, lit_width=8, require_clear=False):
    decoded = bytearray()
    with Decoder(io.BytesIO(bytes(data)), order, lit_width, require_clear) as decoder:
        try:
            while True:
                chunk = decoder.read(io.DEFAULT_BUFFER_SIZE)
                if not chunk:
                    break
                decoded += chunk
        except UnexpectedEndOfDataError as e:
            e.partial = bytes(decoded)
            raise
    return bytes(decoded)
