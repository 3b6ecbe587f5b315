import logging

from flask import Flask, request

import configuration
import hibprequester
import pwdgen
from policy import MIN_LENGTH

logger = logging.getLogger(__name__)

# Upper bound of passwords generated by one request
MAX_BATCH = 100

app = Flask(__name__)
app.json.ensure_ascii = False


class App:
    """
    This class is for holding all data about the app. The setup() method is called before the first request,
    make sure to not raise any errors on loading resources.
    """

    def __init__(self):
        self.config = None
        self.setuped: bool = False

    def setup(self):
        raise NotImplementedError


class ProductionApp(App):
    """
    The production ready implementation of the class.
    """

    def setup(self):
        self.setuped = True
        try:
            self.config = configuration.config_load_from_file("config.json")
        except FileNotFoundError:
            logger.warning("config.json not found, using the default configuration")
            self.config = configuration.create_default_configuration()
        except KeyError as error:
            logger.error("config.json is broken, missing setting %s", error)
            raise
        configuration.configure_logging(self.config.log_level)


the_app = ProductionApp()


@app.before_request
def _start():
    # Loading resources only when a request was made, this enables to change the_app before
    if not the_app.setuped:
        the_app.setup()


def _arg_int(name: str, default: int):
    # None when the parameter is given but not an integer
    if name not in request.args:
        return default
    return request.args.get(name, None, int)


def _arg_bool(name: str, default: bool) -> bool:
    value = request.args.get(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


@app.route('/passwords/generate')
def passwords_generate():
    # Getting length and amount of batches, None if not an integer
    length = _arg_int("length", MIN_LENGTH)
    amount = _arg_int("batch", 1)
    if length is None or amount is None:
        return {"message": "not-a-number"}, 400
    amount = min(max(1, amount), MAX_BATCH)
    check_hibp = _arg_bool("check_hibp", the_app.config.hibp.enabled)
    pwds = []
    for _ in range(amount):
        result, pwd = pwdgen.generate(length, the_app.config.requirements, check_on_hibp=check_hibp,
                                      hibp_timeout=the_app.config.hibp.timeout)
        if result != pwdgen.GenerationResult.SUCCESS:
            return {"message": result.value}, 400
        pwds.append(pwd)
    if amount == 1:
        return {"pwd": pwds[0]}, 200
    else:
        return {"pwds": pwds}, 200


@app.route('/passwords/check_hibp')
def passwords_check_hibp():
    if "password" not in request.args:
        return {"message": "missing-password"}, 400
    amount = hibprequester.pwd_pwned(request.args["password"], timeout=the_app.config.hibp.timeout)
    if amount == 0:
        return {"pwned": False}, 200
    else:
        return {"pwned": True, "amount": amount}, 200


@app.route('/passwords/validate')
def passwords_validate():
    if "password" not in request.args:
        return {"message": "missing-password"}, 400
    valid, broken_rules = the_app.config.requirements.validate(request.args["password"])
    if valid:
        return {"valid": True}, 200
    # Not valid, returning broken rules
    broken_rules_result = {}
    for rule_name, count_and_min in broken_rules.items():
        broken_rules_result[rule_name] = {
            "count": count_and_min[0],
            "expected": count_and_min[1]
        }
    return {"valid": False, "broken_rules": broken_rules_result}, 200
