import hashlib
import logging

import requests

logger = logging.getLogger(__name__)

API_URL = "https://api.pwnedpasswords.com/range/"
TIMEOUT = 10


def pwd_pwned(pwd: str, api_url: str = API_URL, timeout: float = TIMEOUT) -> int:
    r"""Requests the amount of breaches of the provided password.
        Only the first 5 characters of the SHA-1 digest leave the process.
        :param pwd: password to request
        :param api_url: range endpoint, the prefix is appended to it
        :param timeout: seconds to wait for the response
        :return: amount of breaches
        :rtype: int
        """
    pwd_hashed = hashlib.sha1(pwd.encode()).hexdigest().upper()
    prefix, suffix = pwd_hashed[:5], pwd_hashed[5:]
    resp = requests.get(api_url + prefix, timeout=timeout, headers={"Add-Padding": "true"})
    # Errors of the service are not a "not found"
    resp.raise_for_status()
    # Every line is SUFFIX:COUNT, padding entries carry a count of 0
    for line in resp.text.splitlines():
        entry_suffix, _, count = line.strip().partition(":")
        if entry_suffix == suffix:
            return int(count)
    logger.debug("No breach found for hash prefix %s", prefix)
    return 0


def is_pwd_pwned(pwd: str, api_url: str = API_URL, timeout: float = TIMEOUT) -> bool:
    r"""Requests if the provided password was pwned.
        Basically testing pwd_pwned on greater than 0.
        :param pwd: password to request
        :return: if provided password was pwned
        :rtype: bool
        """
    return pwd_pwned(pwd, api_url, timeout) > 0
