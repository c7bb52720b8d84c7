"""
Модуль для анализа нормальных форм отношений
"""
from typing import FrozenSet, List, Tuple

from fd_algorithms import FDAlgorithms
from formatting import format_attribute_set, format_key_set
from models import Dependency, NormalForm, Relation


class NormalFormAnalyzer:
    """Класс для анализа нормальных форм"""

    def __init__(self, relation: Relation):
        self.relation = relation
        self.candidate_keys = relation.candidate_keys()
        self.prime_attributes = self._find_prime_attributes()
        self.non_prime_attributes = self.relation.attributes - self.prime_attributes

    def _find_prime_attributes(self) -> FrozenSet[str]:
        """Найти простые атрибуты (входящие хотя бы в один ключ)"""
        prime_attrs = set()
        for key in self.candidate_keys:
            prime_attrs.update(key)
        return frozenset(prime_attrs)

    def check_1nf(self) -> Tuple[bool, List[str]]:
        """
        Проверка первой нормальной формы

        Значения атрибутов считаются атомарными, поэтому проверяется только
        наличие атрибутов и ключа.
        """
        violations = []

        if not self.relation.attributes:
            violations.append("Отношение не содержит атрибутов")
        elif not self.candidate_keys:
            violations.append("Отношение не имеет потенциального ключа")

        return len(violations) == 0, violations

    def _check_form(self, form: NormalForm) -> Tuple[bool, List[Dependency]]:
        violations = [fd for fd in self.relation.dependencies
                      if FDAlgorithms.violates(self.relation, form, fd, self.candidate_keys)]
        return len(violations) == 0, violations

    def check_2nf(self) -> Tuple[bool, List[Dependency]]:
        """
        Проверка второй нормальной формы

        Returns:
            (соответствует_2НФ, зависимости_с_частичной_зависимостью_от_ключа)
        """
        return self._check_form(NormalForm.SECOND_NF)

    def check_3nf(self) -> Tuple[bool, List[Dependency]]:
        """
        Проверка третьей нормальной формы

        Returns:
            (соответствует_3НФ, нарушающие_зависимости)
        """
        return self._check_form(NormalForm.THIRD_NF)

    def check_bcnf(self) -> Tuple[bool, List[Dependency]]:
        """
        Проверка нормальной формы Бойса-Кодда

        Returns:
            (соответствует_НФБК, зависимости_с_детерминантом_не_суперключом)
        """
        return self._check_form(NormalForm.BCNF)

    def check(self, form: NormalForm) -> Tuple[bool, List[Dependency]]:
        """Проверка произвольной нормальной формы"""
        if form is NormalForm.UNNORMALIZED:
            return True, []
        if form is NormalForm.FIRST_NF:
            is_1nf, _ = self.check_1nf()
            return is_1nf, []
        return self._check_form(form)

    def determine_normal_form(self) -> Tuple[NormalForm, List[Dependency]]:
        """
        Определить текущую нормальную форму отношения

        Returns:
            (нормальная_форма, зависимости_нарушающие_следующую_форму)
        """
        is_1nf, _ = self.check_1nf()
        if not is_1nf:
            return NormalForm.UNNORMALIZED, []

        is_2nf, violations_2nf = self.check_2nf()
        if not is_2nf:
            return NormalForm.FIRST_NF, violations_2nf

        is_3nf, violations_3nf = self.check_3nf()
        if not is_3nf:
            return NormalForm.SECOND_NF, violations_3nf

        is_bcnf, violations_bcnf = self.check_bcnf()
        if not is_bcnf:
            return NormalForm.THIRD_NF, violations_bcnf

        return NormalForm.BCNF, []

    def get_analysis_report(self) -> str:
        """Получить подробный отчет об анализе"""
        report = f"Анализ отношения: {self.relation.name}\n"
        report += "=" * 50 + "\n\n"

        report += f"Атрибуты: {format_attribute_set(self.relation.attributes)}\n"

        dependencies = self.relation.dependencies
        report += f"\nФункциональные зависимости ({len(dependencies)}):\n"
        for fd in dependencies:
            report += f"  - {fd}\n"

        report += f"\nПотенциальные ключи ({len(self.candidate_keys)}): {format_key_set(self.candidate_keys)}\n"

        report += f"\nПростые атрибуты: {format_attribute_set(self.prime_attributes)}\n"
        report += f"Непростые атрибуты: {format_attribute_set(self.non_prime_attributes)}\n"

        nf, violations = self.determine_normal_form()
        report += f"\nТекущая нормальная форма: {nf.value}\n"

        if violations:
            report += "\nЗависимости, препятствующие следующей нормальной форме:\n"
            for fd in violations:
                report += f"  - {fd}\n"

        return report
