"""
Модуль с алгоритмами декомпозиции отношений
"""
from typing import Iterable, List, Tuple

from analyzer import NormalFormAnalyzer
from config import get_logger
from fd_algorithms import FDAlgorithms
from formatting import format_dependency_set, format_key_set
from models import (
    DecompositionStep, Dependency, NormalForm, NormalizationResult, Relation
)

logger = get_logger(__name__)


class Decomposer:
    """Класс для выполнения декомпозиции отношений"""

    @staticmethod
    def decompose_to_3nf(relation: Relation, verbose: bool = False) -> NormalizationResult:
        """
        Декомпозиция с сохранением зависимостей методом синтеза

        Каждое отношение результата находится не ниже чем в 3НФ,
        НФБК не гарантируется.
        """
        analyzer = NormalFormAnalyzer(relation)
        original_form, _ = analyzer.determine_normal_form()

        # Шаг 1: минимальное покрытие
        minimal_fds = FDAlgorithms.minimal_cover(relation.dependencies, verbose)

        # Шаг 2: отношение на каждую левую часть покрытия
        decomposed_relations: List[Relation] = []
        for fd in minimal_fds:
            attrs = fd.attributes
            if any(attrs.issubset(rel.attributes) for rel in decomposed_relations):
                logger.debug("Атрибуты %s уже покрыты, отношение не создается", fd)
                continue

            new_rel = Relation(f"{relation.name}{len(decomposed_relations) + 1}", attrs)
            new_rel.add_dependencies(minimal_fds, update=False)
            decomposed_relations.append(new_rel)
            if verbose:
                logger.info("Добавлено отношение: %s", new_rel)

        # Шаг 3: хотя бы одно отношение должно содержать ключ
        keys = analyzer.candidate_keys
        if decomposed_relations and keys:
            has_key = any(FDAlgorithms.is_superkey(rel.attributes, keys)
                          for rel in decomposed_relations)
            if not has_key:
                key_rel = Relation(f"{relation.name}{len(decomposed_relations) + 1}", keys[0])
                decomposed_relations.append(key_rel)
                if verbose:
                    logger.info("Добавлено отношение с ключом: %s", key_rel)

        steps = []
        if decomposed_relations:
            steps.append(DecompositionStep(
                original_relation=relation,
                resulting_relations=decomposed_relations,
                reason="Декомпозиция в 3НФ методом синтеза"
            ))
        else:
            # Зависимостей нет - декомпозиция не нужна
            decomposed_relations = [relation.copy()]

        preserved, lost = Decomposer._check_dependency_preservation(
            relation.dependencies,
            decomposed_relations
        )

        return NormalizationResult(
            original_form=original_form,
            target_form=NormalForm.THIRD_NF,
            original_relation=relation,
            decomposed_relations=decomposed_relations,
            steps=steps,
            preserved_dependencies=preserved,
            lost_dependencies=lost
        )

    @staticmethod
    def decompose_to_bcnf(relation: Relation, verbose: bool = False) -> NormalizationResult:
        """
        Декомпозиция без потерь в нормальную форму Бойса-Кодда

        Все отношения результата находятся в НФБК, но часть исходных
        зависимостей может быть потеряна.
        """
        analyzer = NormalFormAnalyzer(relation)
        original_form, _ = analyzer.determine_normal_form()

        steps: List[DecompositionStep] = []
        final_relations: List[Relation] = []
        Decomposer._split_bcnf(relation.copy(), final_relations, steps, verbose)

        preserved, lost = Decomposer._check_dependency_preservation(
            relation.dependencies,
            final_relations
        )

        return NormalizationResult(
            original_form=original_form,
            target_form=NormalForm.BCNF,
            original_relation=relation,
            decomposed_relations=final_relations,
            steps=steps,
            preserved_dependencies=preserved,
            lost_dependencies=lost
        )

    @staticmethod
    def _split_bcnf(current_rel: Relation, final_relations: List[Relation],
                    steps: List[DecompositionStep], verbose: bool) -> None:
        """
        Рекурсивный шаг декомпозиции в НФБК

        Отношение делится по наименьшей (в каноническом порядке) нарушающей
        зависимости X -> Y на R1(все атрибуты без Y) и R2(X и Y).
        """
        violations = current_rel.violations(NormalForm.BCNF)

        if not violations:
            final_relations.append(current_rel)
            if verbose:
                logger.info("Отношение в НФБК: %s", current_rel)
                logger.info("Потенциальные ключи: %s", format_key_set(current_rel.candidate_keys()))
            return

        violating_fd = violations[0]
        if verbose:
            logger.info("Отношение не в НФБК: %s", current_rel)
            logger.info("Потенциальные ключи: %s", format_key_set(current_rel.candidate_keys()))
            logger.info("Нарушения: %s", format_dependency_set(violations))

        r1 = Relation(f"{current_rel.name}1", current_rel.attributes - violating_fd.rhs)
        r1.add_dependencies(current_rel.dependencies, update=False)

        r2 = Relation(f"{current_rel.name}2", violating_fd.attributes)
        r2.add_dependencies(current_rel.dependencies, update=False)

        steps.append(DecompositionStep(
            original_relation=current_rel,
            resulting_relations=[r1, r2],
            reason=f"Устранение нарушения НФБК: {violating_fd}",
            violated_dependency=violating_fd
        ))

        Decomposer._split_bcnf(r1, final_relations, steps, verbose)
        Decomposer._split_bcnf(r2, final_relations, steps, verbose)

    @staticmethod
    def _check_dependency_preservation(
            original_fds: Iterable[Dependency],
            decomposed_relations: List[Relation]
    ) -> Tuple[List[Dependency], List[Dependency]]:
        """
        Проверить сохранение функциональных зависимостей после декомпозиции
        """
        preserved = []
        lost = []

        # Собираем все ФЗ из декомпозированных отношений
        all_decomposed_fds = []
        for rel in decomposed_relations:
            all_decomposed_fds.extend(rel.dependencies)

        # Проверяем каждую исходную ФЗ
        for fd in original_fds:
            closure = FDAlgorithms.closure(fd.lhs, all_decomposed_fds)

            if fd.rhs.issubset(closure):
                preserved.append(fd)
            else:
                lost.append(fd)

        return preserved, lost
