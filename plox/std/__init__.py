import re
import time
from typing import Any, List, Optional

from plox.callable import BuiltinFunction
from plox.environment import Environment
from plox.errors import LoxFunctionError
from plox.types import INT64_MAX, INT64_MIN, stringify, type_name

from .console import Console

INT_PATTERN = re.compile(r'[+-]?[0-9]+')
TRUE_STRINGS = {'1', 't', 'T', 'TRUE', 'true', 'True'}
FALSE_STRINGS = {'0', 'f', 'F', 'FALSE', 'false', 'False'}
INSTANCE_TYPES = {'int', 'float', 'boolean', 'string', 'function'}


def populate_standard_environment(env: Environment, console: Optional[Console] = None) -> Environment:
    console = console if console is not None else Console()

    def std_clock(args: List[Any]) -> Any:
        return int(time.time())

    def std_to_string(args: List[Any]) -> Any:
        return stringify(args[0])

    def std_input(args: List[Any]) -> Any:
        return console.read_line()

    def std_parse_string(args: List[Any]) -> Any:
        type_str, value_str = args
        if not (isinstance(type_str, str) and isinstance(value_str, str)):
            raise LoxFunctionError('Arguments are not strings.')
        type_str = type_str.replace('"', '')
        value_str = value_str.replace('"', '')
        if type_str == 'int':
            if INT_PATTERN.fullmatch(value_str):
                value = int(value_str)
                if INT64_MIN <= value <= INT64_MAX:
                    return value
            raise LoxFunctionError(f"Cannot convert '{value_str}' to int.")
        if type_str == 'float':
            # float() also accepts padding and digit separators; plox does not
            if '_' not in value_str and value_str == value_str.strip():
                try:
                    return float(value_str)
                except ValueError:
                    pass
            raise LoxFunctionError(f"Cannot convert '{value_str}' to float.")
        if type_str == 'bool':
            if value_str in TRUE_STRINGS:
                return True
            if value_str in FALSE_STRINGS:
                return False
            raise LoxFunctionError(f"Cannot convert '{value_str}' to boolean.")
        if type_str == 'string':
            return value_str
        raise LoxFunctionError(f"Type '{type_str}' is not supported.")

    def std_is_instance(args: List[Any]) -> Any:
        type_str, value = args
        if not isinstance(type_str, str):
            raise LoxFunctionError('Type argument must be string.')
        type_str = type_str.replace('"', '')
        if type_str in INSTANCE_TYPES:
            return type_name(value) == type_str
        raise LoxFunctionError(f"Type '{type_str}' is not supported.")

    env.define('clock', BuiltinFunction('clock', 0, std_clock))
    env.define('toString', BuiltinFunction('toString', 1, std_to_string))
    env.define('input', BuiltinFunction('input', 0, std_input))
    env.define('parseString', BuiltinFunction('parseString', 2, std_parse_string))
    env.define('isInstance', BuiltinFunction('isInstance', 2, std_is_instance))
    return env
