import logging
import secrets
from typing import Optional

from policy import BYTES_PER_SLOT, ENTROPY_MULTIPLIER

logger = logging.getLogger(__name__)


# Abstract source of cryptographic bytes, the generator is handed one explicitly.
class EntropySource:
    def fill(self, buffer: bytearray):
        raise NotImplementedError()


class SystemEntropySource(EntropySource):
    """
    Entropy source backed by the CSPRNG of the operating system.
    """

    def fill(self, buffer: bytearray):
        buffer[:] = secrets.token_bytes(len(buffer))


def decode_u32_le(data, offset: int = 0) -> int:
    r"""
    Reads four bytes as an unsigned little-endian integer.
    :param data: bytes or bytearray to read from
    :param offset: index of the first byte
    :return: integer in [0, 2**32 - 1]
    """
    if offset < 0 or offset + BYTES_PER_SLOT > len(data):
        raise IndexError(f"Cannot read 4 bytes at offset {offset} of a {len(data)} bytes buffer")
    return int.from_bytes(bytes(data[offset:offset + BYTES_PER_SLOT]), "little")


class SecureBuffer:
    """
    Byte buffer which is overwritten with zeros when its scope is left,
    no matter if the block returned or raised.
    """

    def __init__(self, size: int):
        self.size = size
        self.data = bytearray(size)

    def __len__(self):
        return self.size

    def __enter__(self) -> "SecureBuffer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.wipe()
        return False

    def fill_from(self, source: EntropySource):
        source.fill(self.data)
        if len(self.data) != self.size:
            raise ValueError(f"Entropy source resized the buffer from {self.size} to {len(self.data)} bytes")

    def wipe(self):
        # Writing in place, so the very same memory is cleared
        for i in range(len(self.data)):
            self.data[i] = 0


class EntropyPool(SecureBuffer):
    r"""
    Reusable pool of random bytes, consumed in groups of four.
    The pool starts empty, so the first use forces a refill.
    """

    def __init__(self, source: EntropySource, length: int, multiplier: int = ENTROPY_MULTIPLIER):
        super().__init__(length * multiplier * BYTES_PER_SLOT)
        self.source = source
        self.cursor = self.size
        self.refills = 0

    @property
    def exhausted(self) -> bool:
        return self.cursor + BYTES_PER_SLOT > self.size

    def refill(self):
        r"""
        Overwrites every byte with fresh entropy and resets the cursor.
        Unread bytes of the previous fill are discarded.
        """
        self.fill_from(self.source)
        self.cursor = 0
        self.refills += 1
        logger.debug("Entropy pool refilled (%d bytes, refill #%d)", self.size, self.refills)

    def ensure(self):
        if self.exhausted:
            self.refill()

    def take_u32(self) -> Optional[int]:
        r"""
        :return: the next four bytes as little-endian integer, or None without consuming anything if exhausted
        """
        if self.exhausted:
            return None
        value = decode_u32_le(self.data, self.cursor)
        self.cursor += BYTES_PER_SLOT
        return value

    def wipe(self):
        super().wipe()
        # Nothing left to read, the next use has to refill
        self.cursor = self.size
