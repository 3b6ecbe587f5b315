import re
import sys
from typing import List, Optional

import configuration
import pwdgen
from policy import MAX_LENGTH, MIN_LENGTH


def main(argv: Optional[List[str]] = None) -> int:
    r"""
    Command line entry point: securepassgen <password_length>
    :param argv: arguments including the program name, sys.argv if omitted
    :return: exit status
    """
    if argv is None:
        argv = sys.argv
    app_name = argv[0] if argv else "securepassgen"
    # Checking amount of arguments
    if len(argv) != 2:
        print(f"Usage: {app_name} <password_length>", file=sys.stderr)
        return 1
    # Plain ASCII digits only, int() alone would also take "1_2", " 12 " or "-5"
    if not re.fullmatch(r"\+?[0-9]+", argv[1]):
        print("Invalid password length", file=sys.stderr)
        return 1
    length = int(argv[1])
    result, pwd = pwdgen.generate(length, configuration.create_default_configuration().requirements)
    if result == pwdgen.GenerationResult.INVALID_LENGTH:
        print(f"Password length must be between {MIN_LENGTH} and {MAX_LENGTH}", file=sys.stderr)
        return 1
    if result != pwdgen.GenerationResult.SUCCESS:
        print(f"Cannot generate a password: {result.value}", file=sys.stderr)
        return 1
    print(f"Generated Secure Password: {pwd}")
    return 0


def run():
    configuration.configure_logging()
    sys.exit(main())


if __name__ == '__main__':
    run()
