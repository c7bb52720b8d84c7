"""
Текстовое представление множеств атрибутов, зависимостей, ключей и отношений
"""
from typing import Iterable, List, TYPE_CHECKING

from config import CONFIG

if TYPE_CHECKING:
    from models import Dependency, Relation

EMPTY_SET = "0"


def format_attribute_set(attributes: Iterable[str]) -> str:
    """Атрибуты через запятую без скобок, либо 0 для пустого множества"""
    ordered = sorted(set(attributes))
    if not ordered:
        return EMPTY_SET
    return ", ".join(ordered)


def format_dependency_set(dependencies: Iterable["Dependency"]) -> str:
    """
    Множество зависимостей в фигурных скобках, каждая зависимость в квадратных

    Пример: { [a -> b, f], [a, c -> d, g]}
    """
    items = sorted(dependencies)
    if not items:
        return "{ 0 }"
    return "{ " + ", ".join(f"[{dep}]" for dep in items) + "}"


def format_key_set(keys: Iterable[Iterable[str]]) -> str:
    """
    Множество ключей: каждый ключ в круглых скобках

    Пример: { ( a, c ), ( b ) }
    """
    items: List[str] = [f"( {format_attribute_set(key)} )" for key in keys]
    if not items:
        return "{ 0 }"
    return "{ " + ", ".join(items) + " }"


def indent(width: int = None) -> str:
    if width is None:
        width = CONFIG["DISPLAY"]["WIDTH"]
    return " " * width


def format_relation_set(relations: Iterable["Relation"], width: int = None) -> str:
    """
    Список отношений, под каждым отношением - его потенциальные ключи
    """
    relations = list(relations)
    if not relations:
        return "{ 0 }"

    pad = indent(width)
    blocks = []
    for rel in relations:
        blocks.append(f"{rel}\n{pad}Candidate Keys: {format_key_set(rel.candidate_keys())}")
    return f"\n\n{pad}".join(blocks)
