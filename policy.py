import enum
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

MIN_LENGTH = 12
MAX_LENGTH = 128
# How many 32-bit slots the sampling pool holds per password character
ENTROPY_MULTIPLIER = 2
BYTES_PER_SLOT = 4

UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
DIGITS = "0123456789"
SYMBOLS = "!@#$%^&*()-_=+[]"


class CharClass(enum.Enum):
    # Declaration order is the injection order
    UPPER = "upper"
    LOWER = "lower"
    DIGIT = "digit"
    SYMBOL = "symbol"


ALPHABETS: Mapping[CharClass, str] = {
    CharClass.UPPER: UPPERCASE,
    CharClass.LOWER: LOWERCASE,
    CharClass.DIGIT: DIGITS,
    CharClass.SYMBOL: SYMBOLS,
}

# Broken rules are named like the matching PasswordRequirements field
RULE_NAMES: Mapping[CharClass, str] = {
    CharClass.UPPER: "min_upper",
    CharClass.LOWER: "min_lower",
    CharClass.DIGIT: "min_number",
    CharClass.SYMBOL: "min_symbol",
}


class ErrorKind(enum.Enum):
    INVALID_LENGTH = "invalid_length"
    UNSATISFIABLE_REQUIREMENTS = "unsatisfiable_requirements"


@dataclass(frozen=True)
class PasswordRequirements:
    """
    Immutable description of what a generated password has to contain.
    The has_* flags decide which classes may be used to pad the password,
    the min_* counts how many characters of a class are injected at least.
    """
    has_upper: bool = True
    has_lower: bool = True
    has_number: bool = True
    has_symbol: bool = True
    min_upper: int = 1
    min_lower: int = 1
    min_number: int = 1
    min_symbol: int = 1

    @classmethod
    def default(cls) -> "PasswordRequirements":
        return cls()

    def allowed(self, char_class: CharClass) -> bool:
        return {
            CharClass.UPPER: self.has_upper,
            CharClass.LOWER: self.has_lower,
            CharClass.DIGIT: self.has_number,
            CharClass.SYMBOL: self.has_symbol,
        }[char_class]

    def minimum(self, char_class: CharClass) -> int:
        return {
            CharClass.UPPER: self.min_upper,
            CharClass.LOWER: self.min_lower,
            CharClass.DIGIT: self.min_number,
            CharClass.SYMBOL: self.min_symbol,
        }[char_class]

    def min_required(self) -> int:
        return sum(self.minimum(c) for c in CharClass)

    def filler_alphabet(self) -> str:
        r"""
        :return: the concatenated alphabets of all classes allowed in the filler pool, in class order
        """
        return "".join(ALPHABETS[c] for c in CharClass if self.allowed(c))

    def check(self, length: int) -> Optional[ErrorKind]:
        r"""
        Checks if a password of the given length can be generated at all.
        Must be called before any entropy is consumed.

        :param length: requested password length
        :return: None if generation may start, otherwise the kind of the problem
        """
        if length < MIN_LENGTH or length > MAX_LENGTH:
            return ErrorKind.INVALID_LENGTH
        for char_class in CharClass:
            minimum = self.minimum(char_class)
            if minimum < 0:
                return ErrorKind.UNSATISFIABLE_REQUIREMENTS
            # A disabled class must never show up in the output
            if minimum > 0 and not self.allowed(char_class):
                return ErrorKind.UNSATISFIABLE_REQUIREMENTS
        if self.min_required() > length:
            return ErrorKind.UNSATISFIABLE_REQUIREMENTS
        if self.min_required() < length and not self.filler_alphabet():
            return ErrorKind.UNSATISFIABLE_REQUIREMENTS
        return None

    def validate(self, pwd) -> Tuple[bool, Dict[str, Tuple[int, int]]]:
        r"""
        Recounts every character class of the password and compares it to the minimums.

        :param pwd: password to check, a string or a list of characters
        :return: if the password is valid, and the broken rules as rule -> (count, expected)
        """
        problems = {}
        if len(pwd) < MIN_LENGTH:
            problems["length"] = (len(pwd), MIN_LENGTH)
        for char_class in CharClass:
            count = count_charset(pwd, ALPHABETS[char_class])
            if count < self.minimum(char_class):
                problems[RULE_NAMES[char_class]] = (count, self.minimum(char_class))
        # Characters which are in none of the enabled alphabets
        foreign = len(pwd) - count_charset(pwd, self.filler_alphabet())
        if foreign > 0:
            problems["foreign"] = (foreign, 0)
        return len(problems) == 0, problems


DEFAULT_REQUIREMENTS = PasswordRequirements.default()


def count_charset(txt, charset: str) -> int:
    r"""
    Counts the amount of characters in txt which are in the charset.
    :param txt: text to analyse
    :param charset: charset for referencing
    :return: amount of charset's characters present in txt
    """
    return sum(1 for c in txt if c in charset)
