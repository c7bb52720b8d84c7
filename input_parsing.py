"""
Разбор и проверка вводимых пользователем атрибутов и зависимостей
"""
import re
from typing import Callable, List, Optional, Tuple

from models import AttributeSet

NAME_PATTERN = re.compile(r"[^\W\d]\w*")
DEPENDENCY_CHARS = re.compile(r"[^\w\-> ,;]")

ATTRIBUTE_SEPARATOR = ","
DEPENDENCY_SEPARATOR = ";"
ARROW = "->"


class InvalidDependencyError(ValueError):
    """Строка не является корректной функциональной зависимостью"""

    def __init__(self, text: str, reason: str = "некорректная функциональная зависимость"):
        super().__init__(f"'{text}': {reason}")
        self.text = text
        self.reason = reason


def remove_white_space(text: str) -> str:
    """Удалить табуляции и пробелы по краям"""
    return text.replace("\t", "").strip(" ")


def is_valid_name(text: str) -> bool:
    """Имя начинается с буквы или '_' и содержит только буквы, цифры и '_'"""
    name = remove_white_space(text)
    return bool(name) and NAME_PATTERN.fullmatch(name) is not None


def is_valid_dependency(text: str) -> bool:
    """Грубая проверка строки зависимости: только допустимые символы"""
    cleaned = remove_white_space(text)
    return bool(cleaned) and DEPENDENCY_CHARS.search(cleaned) is None


def valid_split(text: str, separator: str,
                is_valid: Optional[Callable[[str], bool]] = None) -> List[str]:
    """
    Разбить строку по разделителю, отбросив пустые и некорректные части
    """
    parts = []
    for part in text.split(separator):
        part = remove_white_space(part)
        if part and (is_valid is None or is_valid(part)):
            parts.append(part)
    return parts


def parse_attributes(text: str) -> List[str]:
    """Список корректных имен атрибутов из строки вида 'A, B, Cust_Name'"""
    return valid_split(text, ATTRIBUTE_SEPARATOR, is_valid_name)


def parse_dependency(text: str) -> Tuple[AttributeSet, AttributeSet]:
    """
    Разобрать зависимость вида 'A, B -> C'

    Returns:
        (левая_часть, правая_часть)

    Raises:
        InvalidDependencyError: если нет ровно одного '->' или одна из частей
            пуста после проверки имен
    """
    sides = valid_split(text, ARROW)
    if len(sides) != 2 or text.count(ARROW) != 1:
        raise InvalidDependencyError(text)

    lhs = parse_attributes(sides[0])
    rhs = parse_attributes(sides[1])
    if not lhs or not rhs:
        raise InvalidDependencyError(f"{sides[0]} -> {sides[1]}")

    return frozenset(lhs), frozenset(rhs)


def parse_dependencies(text: str) -> Tuple[List[Tuple[AttributeSet, AttributeSet]], List[InvalidDependencyError]]:
    """
    Разобрать несколько зависимостей, разделенных ';'

    Returns:
        (корректные_зависимости, ошибки_разбора)
    """
    dependencies = []
    errors = []
    for part in valid_split(text, DEPENDENCY_SEPARATOR):
        try:
            dependencies.append(parse_dependency(part))
        except InvalidDependencyError as e:
            errors.append(e)
    return dependencies, errors
