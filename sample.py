if __name__ == "__main__":
    import numpy
    import lzwkit.lzw as lzw

    data = b"TOBEORNOTTOBEORTOBEORNOT"
    for order in lzw.Order:
        encoded = lzw.encode(data, order, 8)
        decoded = lzw.decode(encoded, order, 8)
        print(order.name, data)
        print(order.name, encoded.hex())
        print(order.name, decoded)

    with open("sample.py", "rb") as data_file:
        binary = data_file.read()
    values = numpy.frombuffer(binary, dtype=numpy.uint8)
    encoded = lzw.encode(values)
    decoded = numpy.frombuffer(lzw.decode(encoded), dtype=numpy.uint8)
    print(len(values), len(encoded))
    print(numpy.sum(numpy.abs(values.astype(int) - decoded.astype(int))))

    exit()
