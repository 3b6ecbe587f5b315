from typing import Optional

from entropy import EntropyPool

U32_MAX = 2 ** 32 - 1


def max_valid(n: int) -> int:
    r"""
    Rejection threshold for an alphabet of size n, always a multiple of n.
    Values from it upwards would favour the low indices when reduced modulo n.
    """
    if n <= 0:
        raise ValueError("Alphabet must not be empty")
    return U32_MAX - (U32_MAX % n)


def accept(value: int, alphabet: str) -> Optional[str]:
    # [0, max_valid) holds exactly max_valid / n values per symbol, accepting
    # max_valid itself would give index 0 one value more than the others
    if value >= max_valid(len(alphabet)):
        return None
    return alphabet[value % len(alphabet)]


def sample(alphabet: str, pool: EntropyPool) -> Optional[str]:
    r"""
    Draws one symbol of the alphabet without modulo bias.
    :param alphabet: characters to choose from
    :param pool: pool to consume four bytes from
    :return: the symbol, or None if the value was rejected or the pool is exhausted.
             In both cases the caller has to refill before retrying.
    """
    value = pool.take_u32()
    if value is None:
        return None
    return accept(value, alphabet)


def draw(alphabet: str, pool: EntropyPool) -> str:
    # Sampling until a symbol is accepted, refilling on every rejection
    symbol = sample(alphabet, pool)
    while symbol is None:
        pool.refill()
        symbol = sample(alphabet, pool)
    return symbol
