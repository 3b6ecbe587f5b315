import enum
import logging
from typing import List, Optional, Tuple

import hibprequester
from entropy import EntropyPool, EntropySource, SecureBuffer, SystemEntropySource, decode_u32_le
from policy import ALPHABETS, BYTES_PER_SLOT, DEFAULT_REQUIREMENTS, CharClass, ErrorKind, PasswordRequirements
from sampler import draw

logger = logging.getLogger(__name__)


class GenerationResult(enum.Enum):
    SUCCESS = "success"
    INVALID_LENGTH = ErrorKind.INVALID_LENGTH.value
    UNSATISFIABLE_REQUIREMENTS = ErrorKind.UNSATISFIABLE_REQUIREMENTS.value


class GenerationError(Exception):
    def __init__(self, kind: ErrorKind):
        super().__init__(f"Password generation refused: {kind.value}")
        self.kind = kind


def generate(length: int, requirements: PasswordRequirements = None, source: EntropySource = None,
             check_on_hibp: bool = False, hibp_timeout: float = hibprequester.TIMEOUT) -> Tuple[GenerationResult, Optional[str]]:
    r"""
    Generating a password with secure randomness and without modulo bias.
    :param length: length of the password, within [MIN_LENGTH, MAX_LENGTH]
    :param requirements: requirements to satisfy, every class with at least one character if omitted
    :param source: entropy source to draw from, the CSPRNG of the os if omitted
    :param check_on_hibp: regenerate as long as the password is known to HIBP
    :param hibp_timeout: seconds to wait for every HIBP lookup
    :return: SUCCESS and the password, or the reason why nothing was generated
    """
    requirements = requirements or DEFAULT_REQUIREMENTS
    # Refusing before any entropy is consumed
    problem = requirements.check(length)
    if problem is not None:
        logger.debug("Refusing to generate a password of length %d: %s", length, problem.value)
        return GenerationResult(problem.value), None
    source = source or SystemEntropySource()
    buffer: List[str] = []
    with EntropyPool(source, length) as pool:
        try:
            attempt = 0
            while True:
                attempt += 1
                buffer.clear()
                if attempt == 1:
                    # A fresh pool is empty, so this fills it
                    pool.ensure()
                else:
                    pool.refill()
                inject_requirements(buffer, requirements, pool)
                fill(buffer, requirements, length, pool)
                shuffle(buffer, source)
                valid, broken_rules = requirements.validate(buffer)
                if not valid:
                    logger.warning("Generated password broke %s, regenerating (attempt %d)", sorted(broken_rules), attempt)
                    continue
                pwd = "".join(buffer)
                if check_on_hibp and hibprequester.is_pwd_pwned(pwd, timeout=hibp_timeout):
                    logger.warning("Generated password was found on HIBP, regenerating (attempt %d)", attempt)
                    continue
                logger.debug("Password generated after %d attempt(s) and %d pool refill(s)", attempt, pool.refills)
                return GenerationResult.SUCCESS, pwd
        finally:
            buffer.clear()


def generate_password(length: int, requirements: PasswordRequirements = None, source: EntropySource = None,
                      check_on_hibp: bool = False, hibp_timeout: float = hibprequester.TIMEOUT) -> str:
    # Same as generate(), but raising instead of returning the problem
    result, pwd = generate(length, requirements, source, check_on_hibp, hibp_timeout)
    if result != GenerationResult.SUCCESS:
        raise GenerationError(ErrorKind(result.value))
    return pwd


def inject_requirements(buffer: List[str], requirements: PasswordRequirements, pool: EntropyPool):
    # Adding the needed minimum of every class, always in the same class order
    for char_class in CharClass:
        for _ in range(requirements.minimum(char_class)):
            buffer.append(draw(ALPHABETS[char_class], pool))


def fill(buffer: List[str], requirements: PasswordRequirements, length: int, pool: EntropyPool):
    # Adding random chars of every allowed class to match the length
    charset = requirements.filler_alphabet()
    while len(buffer) < length:
        buffer.append(draw(charset, pool))


def shuffle(buffer: list, source: EntropySource):
    r"""
    Fisher-Yates shuffle in place, fed by its own entropy straight from the source.
    The i-th group of four bytes decides the swap partner of position i.
    :param buffer: list to permute
    :param source: entropy source
    """
    with SecureBuffer(len(buffer) * BYTES_PER_SLOT) as shuffle_entropy:
        shuffle_entropy.fill_from(source)
        for i in range(len(buffer) - 1, 0, -1):
            j = decode_u32_le(shuffle_entropy.data, i * BYTES_PER_SLOT) % (i + 1)
            buffer[i], buffer[j] = buffer[j], buffer[i]
