"""
Модуль с классами для представления данных реляционной модели
"""
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from config import CONFIG
from formatting import format_attribute_set, format_dependency_set

AttributeSet = FrozenSet[str]


def attribute_set_key(attributes: Iterable[str]) -> Tuple[int, Tuple[str, ...]]:
    """
    Ключ сортировки множества атрибутов

    Меньшее по мощности множество идет раньше, при равной мощности
    множества сравниваются поэлементно в отсортированном порядке.
    """
    ordered = tuple(sorted(set(attributes)))
    return len(ordered), ordered


def compare_attribute_sets(lhs: Iterable[str], rhs: Iterable[str]) -> int:
    """Сравнение двух множеств атрибутов: -1, 0 или 1"""
    left, right = attribute_set_key(lhs), attribute_set_key(rhs)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


class NormalForm(Enum):
    """Перечисление нормальных форм"""
    UNNORMALIZED = "Ненормализованная"
    FIRST_NF = "1НФ"
    SECOND_NF = "2НФ"
    THIRD_NF = "3НФ"
    BCNF = "НФБК"

    @property
    def rank(self) -> int:
        return list(NormalForm).index(self)

    def at_least(self, other: "NormalForm") -> bool:
        return self.rank >= other.rank


@total_ordering
@dataclass(frozen=True)
class Dependency:
    """
    Класс для представления функциональной зависимости lhs -> rhs

    Атрибуты правой части, входящие в левую, отбрасываются, поэтому
    тривиальная зависимость построена быть не может.
    """
    lhs: AttributeSet
    rhs: AttributeSet

    def __post_init__(self):
        lhs = frozenset(self.lhs)
        object.__setattr__(self, "lhs", lhs)
        object.__setattr__(self, "rhs", frozenset(self.rhs) - lhs)
        if not self.lhs or not self.rhs:
            raise ValueError("Левая и правая части зависимости не могут быть пустыми")

    @property
    def attributes(self) -> AttributeSet:
        """Все атрибуты зависимости (lhs и rhs)"""
        return self.lhs | self.rhs

    def sort_key(self):
        return attribute_set_key(self.lhs), attribute_set_key(self.rhs)

    def __lt__(self, other):
        if not isinstance(other, Dependency):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def combine(self, other: "Dependency") -> "Dependency":
        """
        Объединить правые части двух зависимостей с одинаковой левой частью

        Если левые части различаются, возвращается исходная зависимость.
        """
        if other.lhs != self.lhs:
            return self
        return Dependency(self.lhs, self.rhs | other.rhs)

    def __str__(self):
        return f"{format_attribute_set(self.lhs)} -> {format_attribute_set(self.rhs)}"

    def __repr__(self):
        return str(self)


class Relation:
    """
    Класс для представления отношения

    Отношение хранит имя, множество атрибутов и множество функциональных
    зависимостей. Зависимости хранятся по левой части, поэтому двух
    зависимостей с одинаковой левой частью не бывает: при добавлении
    правые части объединяются.
    """

    def __init__(self, name: str, attributes: Optional[Iterable[str]] = None,
                 dependencies: Optional[Iterable[Dependency]] = None):
        self.name = name
        self._attributes = {attr for attr in (attributes or ()) if attr}
        self._dependencies: Dict[AttributeSet, Dependency] = {}
        if dependencies:
            self.add_dependencies(dependencies)

    # ---------------------------------------------------------------- доступ

    @property
    def attributes(self) -> AttributeSet:
        return frozenset(self._attributes)

    @property
    def dependencies(self) -> List[Dependency]:
        """Зависимости отношения в каноническом порядке"""
        return sorted(self._dependencies.values())

    def find_dependency(self, lhs: Iterable[str]) -> Optional[Dependency]:
        """Найти зависимость с заданной левой частью"""
        return self._dependencies.get(frozenset(lhs))

    def copy(self) -> "Relation":
        return Relation(self.name, self._attributes, self._dependencies.values())

    # ------------------------------------------------------------- атрибуты

    def add_attribute(self, attribute: str) -> bool:
        """Добавить атрибут. False, если атрибут пустой или уже существует"""
        if not attribute or attribute in self._attributes:
            return False
        self._attributes.add(attribute)
        return True

    def add_attributes(self, attributes: Iterable[str]) -> int:
        """Добавить несколько атрибутов, возвращает число добавленных"""
        added = 0
        for attr in attributes:
            if self.add_attribute(attr):
                added += 1
        return added

    def remove_attribute(self, attribute: str) -> bool:
        """
        Удалить атрибут из отношения

        Зависимости, в левой части которых есть атрибут, удаляются целиком.
        Из правых частей атрибут удаляется, зависимость остается, если
        правая часть не опустела.
        """
        if attribute not in self._attributes:
            return False

        for lhs, dep in list(self._dependencies.items()):
            if attribute in dep.lhs:
                del self._dependencies[lhs]
            elif attribute in dep.rhs:
                rhs = dep.rhs - {attribute}
                if rhs:
                    self._dependencies[lhs] = Dependency(lhs, rhs)
                else:
                    del self._dependencies[lhs]

        self._attributes.discard(attribute)
        return True

    def remove_attributes(self, attributes: Iterable[str]) -> int:
        """Удалить несколько атрибутов, возвращает число удаленных"""
        removed = 0
        for attr in list(attributes):
            if self.remove_attribute(attr):
                removed += 1
        return removed

    def set_attributes(self, attributes: Iterable[str]) -> None:
        """
        Заменить множество атрибутов

        Зависимости сохраняются только в той мере, в какой они укладываются
        в новое множество (как при добавлении без обновления атрибутов).
        """
        saved = list(self._dependencies.values())
        self.clear_attributes()
        self._attributes = {attr for attr in attributes if attr}
        self.add_dependencies(saved, update=False)

    def clear_attributes(self) -> None:
        """Очистить атрибуты (вместе с ними удаляются все зависимости)"""
        self._dependencies.clear()
        self._attributes.clear()

    # ----------------------------------------------------------- зависимости

    def add_dependency(self, lhs: Iterable[str], rhs: Iterable[str],
                       update: bool = True) -> Optional[Dependency]:
        """
        Добавить зависимость lhs -> rhs

        Атрибуты правой части, уже входящие в левую, отбрасываются.

        Returns:
            Зависимость, хранящуюся в отношении для этой левой части
            (с объединенной правой частью), либо None, если зависимость
            не добавлена
        """
        lhs = frozenset(lhs)
        rhs = frozenset(rhs) - lhs
        if not lhs or not rhs:
            return None
        return self.add_functional_dependency(Dependency(lhs, rhs), update)

    def add_functional_dependency(self, dependency: Dependency,
                                  update: bool = True) -> Optional[Dependency]:
        """
        Добавить зависимость в отношение

        Args:
            dependency: Функциональная зависимость
            update: Если True, недостающие атрибуты добавляются в отношение.
                Иначе зависимость с неизвестной левой частью отклоняется,
                а неизвестные атрибуты правой части отбрасываются.

        Returns:
            Хранящаяся зависимость для этой левой части, либо None
        """
        lhs = dependency.lhs
        rhs = dependency.rhs - lhs
        if not rhs:
            return None

        if not dependency.attributes.issubset(self._attributes):
            if update:
                self._attributes.update(lhs | rhs)
            else:
                if not lhs.issubset(self._attributes):
                    return None
                rhs = rhs & self._attributes
                if not rhs:
                    return None

        stored = Dependency(lhs, rhs)
        existing = self._dependencies.get(lhs)
        if existing is not None:
            stored = existing.combine(stored)
        self._dependencies[lhs] = stored
        return stored

    def add_dependencies(self, dependencies: Iterable[Dependency], update: bool = True) -> int:
        """Добавить несколько зависимостей, возвращает число добавленных"""
        added = 0
        for dep in dependencies:
            if self.add_functional_dependency(dep, update) is not None:
                added += 1
        return added

    def remove_dependency(self, lhs: Iterable[str], rhs: Iterable[str]) -> bool:
        """
        Удалить зависимость lhs -> rhs

        Если в отношении есть зависимость с той же левой частью, из ее правой
        части удаляются только совпавшие атрибуты. True, если что-то удалено.
        """
        lhs = frozenset(lhs)
        existing = self._dependencies.get(lhs)
        if existing is None:
            return False

        removed = existing.rhs & frozenset(rhs)
        if not removed:
            return False

        remaining = existing.rhs - removed
        if remaining:
            self._dependencies[lhs] = Dependency(lhs, remaining)
        else:
            del self._dependencies[lhs]
        return True

    def remove_functional_dependency(self, dependency: Dependency) -> bool:
        return self.remove_dependency(dependency.lhs, dependency.rhs)

    def set_dependencies(self, dependencies: Iterable[Dependency], update: bool = True) -> int:
        """Заменить множество зависимостей, возвращает число добавленных"""
        dependencies = list(dependencies)
        self.clear_dependencies()
        return self.add_dependencies(dependencies, update)

    def clear_dependencies(self) -> None:
        self._dependencies.clear()

    # --------------------------------------------------------------- анализ

    def closure(self, attributes: Iterable[str]) -> AttributeSet:
        """Замыкание множества атрибутов по зависимостям отношения"""
        from fd_algorithms import FDAlgorithms
        return FDAlgorithms.closure(attributes, self._dependencies.values())

    def candidate_keys(self) -> List[AttributeSet]:
        from fd_algorithms import FDAlgorithms
        return FDAlgorithms.find_candidate_keys(self)

    def is_superkey(self, attributes: Iterable[str]) -> bool:
        """Содержит ли множество хотя бы один потенциальный ключ"""
        from fd_algorithms import FDAlgorithms
        return FDAlgorithms.is_superkey(attributes, self.candidate_keys())

    def is_partialkey(self, attributes: Iterable[str]) -> bool:
        """Является ли множество частью ключа, но не суперключом"""
        from fd_algorithms import FDAlgorithms
        return FDAlgorithms.is_partialkey(attributes, self.candidate_keys())

    def is_prime(self, attributes: Iterable[str]) -> bool:
        """Входят ли все атрибуты в один потенциальный ключ"""
        from fd_algorithms import FDAlgorithms
        return FDAlgorithms.is_prime(attributes, self.candidate_keys())

    def violations(self, form: NormalForm) -> List[Dependency]:
        """Зависимости, нарушающие нормальную форму"""
        from fd_algorithms import FDAlgorithms
        return FDAlgorithms.find_violations(self, form)

    def is_normal(self, form: NormalForm) -> bool:
        return not self.violations(form)

    def minimal_cover(self, verbose: bool = False) -> List[Dependency]:
        from fd_algorithms import FDAlgorithms
        return FDAlgorithms.minimal_cover(self.dependencies, verbose)

    def decompose_preserving(self, verbose: bool = False) -> List["Relation"]:
        """Декомпозиция с сохранением зависимостей (не ниже 3НФ)"""
        from decomposition import Decomposer
        return Decomposer.decompose_to_3nf(self, verbose).decomposed_relations

    def decompose_not_preserving(self, verbose: bool = False) -> List["Relation"]:
        """Декомпозиция без потерь в НФБК (зависимости могут теряться)"""
        from decomposition import Decomposer
        return Decomposer.decompose_to_bcnf(self, verbose).decomposed_relations

    # ------------------------------------------------------------- сравнение

    def sort_key(self):
        return (attribute_set_key(self._attributes), len(self._dependencies),
                tuple(dep.sort_key() for dep in self.dependencies), self.name)

    def __eq__(self, other):
        if not isinstance(other, Relation):
            return NotImplemented
        return (self.name == other.name
                and self._attributes == other._attributes
                and self._dependencies == other._dependencies)

    def __lt__(self, other):
        if not isinstance(other, Relation):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self):
        text = f"{self.name}({format_attribute_set(self._attributes)})"
        if self._dependencies:
            pad = " " * CONFIG["DISPLAY"]["WIDTH"]
            text += f"\n{pad}Functional Dependencies - {format_dependency_set(self.dependencies)}"
        return text

    def __repr__(self):
        return f"{self.name}({format_attribute_set(self._attributes)})"


@dataclass
class DecompositionStep:
    """Класс для представления шага декомпозиции"""
    original_relation: Relation
    resulting_relations: List[Relation]
    reason: str
    violated_dependency: Optional[Dependency] = None

    def __repr__(self):
        result_str = ", ".join([rel.name for rel in self.resulting_relations])
        return f"Декомпозиция {self.original_relation.name} → [{result_str}]: {self.reason}"


@dataclass
class NormalizationResult:
    """Класс для представления результата нормализации"""
    original_form: NormalForm
    target_form: NormalForm
    original_relation: Relation
    decomposed_relations: List[Relation]
    steps: List[DecompositionStep] = field(default_factory=list)
    preserved_dependencies: List[Dependency] = field(default_factory=list)
    lost_dependencies: List[Dependency] = field(default_factory=list)

    def is_dependency_preserving(self) -> bool:
        return len(self.lost_dependencies) == 0

    def was_decomposed(self) -> bool:
        """Потребовалась ли декомпозиция (исходная форма ниже целевой)"""
        return not self.original_form.at_least(self.target_form)

    def get_summary(self) -> str:
        """Получить краткое описание результата"""
        summary = f"Нормализация из {self.original_form.value} в {self.target_form.value}\n"
        summary += f"Исходное отношение: {self.original_relation!r}\n"
        summary += f"Результирующие отношения: {len(self.decomposed_relations)}\n"
        for rel in self.decomposed_relations:
            summary += f"  - {rel!r}\n"
        if self.lost_dependencies:
            summary += f"Потерянные зависимости: {len(self.lost_dependencies)}\n"
            for dep in self.lost_dependencies:
                summary += f"  - {dep}\n"
        return summary
