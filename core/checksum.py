"""
CCITT CRC-16 used as the CPU integer work unit.

Bit-at-a-time on purpose: the point is a steady integer workload, not a fast CRC.
Follows the stress-ng cpu "crc16" method, shifting the input byte each bit
as X-25 does. Earlier gsperf builds never shifted it, so their printed
checksums differ from this one.
"""

CRC16_POLYNOMIAL = 0x8408
CRC16_SEED = 0xFFFF


def ccitt_crc16(buf, crc=CRC16_SEED):
    """
    Fold *buf* into a running CRC-16.

    Feeding the returned value back in as *crc* for the next buffer gives the
    same result as one call over the concatenated buffers.
    """
    for byte in buf:
        val = byte
        for _ in range(8):
            do_xor = (val ^ crc) & 1
            crc >>= 1
            val >>= 1
            if do_xor:
                crc ^= CRC16_POLYNOMIAL
    return crc


def finalize_crc16(crc):
    """Invert and byte-swap a running CRC into its reported form."""
    crc ^= 0xFFFF
    return ((crc << 8) | (crc >> 8)) & 0xFFFF
