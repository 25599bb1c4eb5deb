import enum

from .errors import UnexpectedEndOfDataError

CHUNK_SIZE = 4096


class Order(enum.IntEnum):
    # GIF and TIFF pack codes from the least significant bit of each byte,
    # PDF from the most significant bit.
    LSB = 0
    MSB = 1


class BitReader:
    def __init__(self, source, chunk_size=CHUNK_SIZE):
        self.source = source
        self.chunk_size = chunk_size
        self.byte_array = b""
        self.byte_offset = 0
        self.tmp_byte = 0
        self.remain_bit_count = 0

    def _next_byte(self):
        if self.byte_offset == len(self.byte_array):
            self.byte_array = self.source.read(self.chunk_size)
            self.byte_offset = 0
            if not self.byte_array:
                raise UnexpectedEndOfDataError("lzw: unexpected end of data")
        byte = self.byte_array[self.byte_offset]
        self.byte_offset += 1
        return byte

    def read(self, bit_count):
        raise NotImplementedError


class LSBBitReader(BitReader):
    def __read_bits(self, value, write_offset, bit_count):
        if self.remain_bit_count == 0:
            self.tmp_byte = self._next_byte()
            self.remain_bit_count = 8

        read_bit_count = min(self.remain_bit_count, bit_count)
        bit_mask = (1 << read_bit_count) - 1
        value |= (self.tmp_byte & bit_mask) << write_offset
        self.tmp_byte >>= read_bit_count
        self.remain_bit_count -= read_bit_count
        bit_count -= read_bit_count
        write_offset += read_bit_count
        return value, write_offset, bit_count

    def read(self, bit_count):
        value = 0
        write_offset = 0
        while 0 < bit_count:
            value, write_offset, bit_count = self.__read_bits(value, write_offset, bit_count)
        return value


class MSBBitReader(BitReader):
    def __read_bits(self, value, bit_count):
        if self.remain_bit_count == 0:
            self.tmp_byte = self._next_byte()
            self.remain_bit_count = 8

        read_bit_count = min(self.remain_bit_count, bit_count)
        bit_mask = (1 << read_bit_count) - 1
        self.remain_bit_count -= read_bit_count
        value = (value << read_bit_count) | ((self.tmp_byte >> self.remain_bit_count) & bit_mask)
        bit_count -= read_bit_count
        return value, bit_count

    def read(self, bit_count):
        value = 0
        while 0 < bit_count:
            value, bit_count = self.__read_bits(value, bit_count)
        return value


class BitWriter:
    def __init__(self, sink, chunk_size=CHUNK_SIZE):
        self.sink = sink
        self.chunk_size = chunk_size
        self.byte_array = bytearray()
        self.bit_offset = 0
        self.tmp_byte = 0

    def _put_byte(self, byte):
        self.byte_array.append(byte)
        if self.chunk_size <= len(self.byte_array):
            self.__drain()

    def __drain(self):
        if self.byte_array:
            self.sink.write(bytes(self.byte_array))
            self.byte_array = bytearray()

    def write(self, value, bits):
        raise NotImplementedError

    def flush(self):
        # padding bits of the last byte stay zero
        if 0 < self.bit_offset:
            self.byte_array.append(self.tmp_byte)
            self.tmp_byte = 0
            self.bit_offset = 0
        self.__drain()


class LSBBitWriter(BitWriter):
    def __write_bits(self, value, bits):
        remain_bits = 8 - self.bit_offset
        if remain_bits <= bits:
            bit_mask = (1 << remain_bits) - 1
            self._put_byte(self.tmp_byte | ((value & bit_mask) << self.bit_offset))
            self.tmp_byte = 0
            self.bit_offset = 0
            return value >> remain_bits, bits - remain_bits

        bit_mask = (1 << bits) - 1
        self.tmp_byte |= (value & bit_mask) << self.bit_offset
        self.bit_offset += bits
        return value, 0

    def write(self, value, bits):
        while 0 < bits:
            value, bits = self.__write_bits(value, bits)


class MSBBitWriter(BitWriter):
    def __write_bits(self, value, bits):
        remain_bits = 8 - self.bit_offset
        if remain_bits <= bits:
            bits -= remain_bits
            bit_mask = (1 << remain_bits) - 1
            self._put_byte(self.tmp_byte | ((value >> bits) & bit_mask))
            self.tmp_byte = 0
            self.bit_offset = 0
            return value, bits

        bit_mask = (1 << bits) - 1
        self.bit_offset += bits
        self.tmp_byte |= (value & bit_mask) << (8 - self.bit_offset)
        return value, 0

    def write(self, value, bits):
        while 0 < bits:
            value, bits = self.__write_bits(value, bits)


def make_bit_reader(order, source):
    order = Order(order)
    if order == Order.LSB:
        return LSBBitReader(source)
    return MSBBitReader(source)


def make_bit_writer(order, sink):
    order = Order(order)
    if order == Order.LSB:
        return LSBBitWriter(sink)
    return MSBBitWriter(sink)
