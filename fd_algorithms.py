"""
Алгоритмы для работы с функциональными зависимостями
"""
from typing import FrozenSet, Iterable, List, Optional, Sequence, Set

from config import get_logger
from formatting import format_dependency_set
from models import AttributeSet, Dependency, NormalForm, Relation, attribute_set_key

logger = get_logger(__name__)


class FDAlgorithms:
    """Класс с алгоритмами для работы с функциональными зависимостями"""

    @staticmethod
    def closure(attributes: Iterable[str], fds: Iterable[Dependency]) -> AttributeSet:
        """
        Вычисление замыкания множества атрибутов

        Args:
            attributes: Множество атрибутов
            fds: Функциональные зависимости

        Returns:
            Замыкание множества атрибутов
        """
        fds = list(fds)
        closure = set(attributes)
        changed = True

        while changed:
            changed = False
            for fd in fds:
                # Если детерминант ФЗ содержится в замыкании
                if fd.lhs.issubset(closure):
                    new_attrs = fd.rhs - closure
                    if new_attrs:
                        closure.update(new_attrs)
                        changed = True

        return frozenset(closure)

    @staticmethod
    def is_superkey(attributes: Iterable[str], keys: Iterable[AttributeSet]) -> bool:
        """Содержит ли множество атрибутов хотя бы один из ключей"""
        attributes = frozenset(attributes)
        return any(key.issubset(attributes) for key in keys)

    @staticmethod
    def is_partialkey(attributes: Iterable[str], keys: Sequence[AttributeSet]) -> bool:
        """Является ли множество подмножеством ключа, не будучи суперключом"""
        attributes = frozenset(attributes)
        return (any(attributes.issubset(key) for key in keys)
                and not FDAlgorithms.is_superkey(attributes, keys))

    @staticmethod
    def is_prime(attributes: Iterable[str], keys: Iterable[AttributeSet]) -> bool:
        """Все ли атрибуты входят в один и тот же потенциальный ключ"""
        attributes = frozenset(attributes)
        return any(attributes.issubset(key) for key in keys)

    @staticmethod
    def next_iteration(working: Set[AttributeSet], attributes: AttributeSet) -> Set[AttributeSet]:
        """Расширить каждое рабочее множество на один атрибут"""
        return {candidate | {attr}
                for candidate in working
                for attr in attributes
                if attr not in candidate}

    @staticmethod
    def find_candidate_keys(relation: Relation) -> List[AttributeSet]:
        """
        Найти все потенциальные ключи отношения

        Перебор по решетке подмножеств атрибутов. Начинаем с атрибутов,
        которые не встречаются ни в одной правой части (они входят в любой
        ключ), и на каждом шаге расширяем рабочие множества на один атрибут,
        отбрасывая надмножества уже найденных ключей.

        Returns:
            Список минимальных ключей в каноническом порядке
        """
        all_attrs = relation.attributes
        fds = relation.dependencies

        produced: Set[str] = set()
        for fd in fds:
            produced.update(fd.rhs)

        seed = all_attrs - produced
        if not seed:
            seed = all_attrs

        working: Set[FrozenSet[str]] = {frozenset([attr]) for attr in seed}
        keys: List[AttributeSet] = []

        while working:
            for candidate in sorted(working, key=attribute_set_key):
                if (FDAlgorithms.closure(candidate, fds).issuperset(all_attrs)
                        and not FDAlgorithms.is_superkey(candidate, keys)):
                    keys.append(candidate)

            working = FDAlgorithms.next_iteration(working, all_attrs)
            working = {candidate for candidate in working
                       if not FDAlgorithms.is_superkey(candidate, keys)}

        return sorted(keys, key=attribute_set_key)

    @staticmethod
    def violates(relation: Relation, form: NormalForm, fd: Dependency,
                 keys: Optional[List[AttributeSet]] = None) -> bool:
        """
        Нарушает ли зависимость нормальную форму отношения

        - 2НФ: детерминант является частью ключа и зависимые атрибуты не простые
        - 3НФ: детерминант не суперключ и зависимые атрибуты не простые
        - НФБК: детерминант не суперключ
        """
        if keys is None:
            keys = relation.candidate_keys()

        if form is NormalForm.SECOND_NF:
            return FDAlgorithms.is_partialkey(fd.lhs, keys) and not FDAlgorithms.is_prime(fd.rhs, keys)
        if form is NormalForm.THIRD_NF:
            return not FDAlgorithms.is_superkey(fd.lhs, keys) and not FDAlgorithms.is_prime(fd.rhs, keys)
        if form is NormalForm.BCNF:
            return not FDAlgorithms.is_superkey(fd.lhs, keys)
        return False

    @staticmethod
    def find_violations(relation: Relation, form: NormalForm) -> List[Dependency]:
        """Все зависимости отношения, нарушающие нормальную форму"""
        keys = relation.candidate_keys()
        return [fd for fd in relation.dependencies
                if FDAlgorithms.violates(relation, form, fd, keys)]

    @staticmethod
    def reduce_rhs(fds: Iterable[Dependency]) -> List[Dependency]:
        """Разделить правые части: одна зависимость на каждый зависимый атрибут"""
        split_fds = set()
        for fd in fds:
            for attr in fd.rhs - fd.lhs:
                split_fds.add(Dependency(fd.lhs, {attr}))
        return sorted(split_fds)

    @staticmethod
    def _reduce_dependency_lhs(scratch: Relation, fd: Dependency) -> bool:
        """
        Удалить лишние атрибуты из левой части одной зависимости

        После каждого успешного удаления перебор начинается заново,
        так как набор зависимостей изменился.
        """
        determinant = set(fd.lhs)
        changed = True
        while changed and len(determinant) > 1:
            changed = False
            for attr in sorted(determinant):
                determinant.discard(attr)
                if fd.rhs.issubset(scratch.closure(determinant)):
                    scratch.remove_dependency(determinant | {attr}, fd.rhs)
                    scratch.add_dependency(determinant, fd.rhs)
                    logger.debug("Атрибут %s лишний в левой части %s", attr, fd)
                    changed = True
                    break
                determinant.add(attr)

        return frozenset(determinant) != fd.lhs

    @staticmethod
    def reduce_lhs(fds: Iterable[Dependency]) -> List[Dependency]:
        """Удалить избыточные атрибуты из левых частей"""
        fds = list(fds)
        scratch = Relation("temp", dependencies=fds)
        for fd in fds:
            if len(fd.lhs) > 1:
                FDAlgorithms._reduce_dependency_lhs(scratch, fd)

        return FDAlgorithms.reduce_rhs(scratch.dependencies)

    @staticmethod
    def reduce_rules(fds: Iterable[Dependency]) -> List[Dependency]:
        """Удалить зависимости, выводимые из остальных"""
        fds = list(fds)
        scratch = Relation("temp", dependencies=fds)
        for fd in fds:
            scratch.remove_functional_dependency(fd)
            if not fd.rhs.issubset(scratch.closure(fd.lhs)):
                scratch.add_functional_dependency(fd)
            else:
                logger.debug("Зависимость %s избыточна", fd)

        return FDAlgorithms.reduce_rhs(scratch.dependencies)

    @staticmethod
    def minimal_cover(fds: Iterable[Dependency], verbose: bool = False) -> List[Dependency]:
        """
        Минимальное покрытие множества зависимостей

        Args:
            fds: Функциональные зависимости (не изменяются)
            verbose: Выводить в лог результат каждого шага

        Returns:
            Эквивалентное множество зависимостей, в котором зависимости
            с одинаковой левой частью объединены
        """
        # Шаг 1: Разделить правые части
        cover = FDAlgorithms.reduce_rhs(fds)
        if verbose:
            logger.info("Сокращение правых частей: %s", format_dependency_set(cover))

        # Шаг 2: Удалить избыточные атрибуты из левых частей
        cover = FDAlgorithms.reduce_lhs(cover)
        if verbose:
            logger.info("Сокращение левых частей: %s", format_dependency_set(cover))

        # Шаг 3: Удалить избыточные ФЗ
        cover = FDAlgorithms.reduce_rules(cover)
        if verbose:
            logger.info("Удаление избыточных зависимостей: %s", format_dependency_set(cover))

        return Relation("cover", dependencies=cover).dependencies
