"""CRC-8 checksum used to protect serial frames."""

CRC_POLY = 0x07
CRC_INIT = 0x00


def crc8(data):
    """Return the CRC-8 (polynomial 0x07, initial value 0x00) of ``data``.

    ``data`` is any bytes-like object.
    """
    crc = CRC_INIT
    for byte in bytes(data):
        crc ^= byte
        for _ in range(8):
            if crc & 0x80:
                crc = ((crc << 1) ^ CRC_POLY) & 0xFF
            else:
                crc = (crc << 1) & 0xFF
    return crc