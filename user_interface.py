"""
Текстовый интерфейс программы нормализации отношений
"""
import sys
from typing import Callable, Iterable, Optional, TextIO

from analyzer import NormalFormAnalyzer
from config import CONFIG, get_logger, setup_logging
from decomposition import Decomposer
from formatting import (
    format_attribute_set, format_dependency_set, format_key_set, format_relation_set
)
from input_parsing import (
    is_valid_dependency, is_valid_name, parse_attributes, parse_dependencies,
    parse_dependency, remove_white_space, InvalidDependencyError
)
from models import NormalForm, Relation

logger = get_logger(__name__)

NORMAL_FORM_NAMES = {
    NormalForm.SECOND_NF: "Вторая нормальная форма (2НФ)",
    NormalForm.THIRD_NF: "Третья нормальная форма (3НФ)",
    NormalForm.BCNF: "Нормальная форма Бойса-Кодда (НФБК)",
}

NORMAL_FORM_CHOICES = {
    "1": NormalForm.SECOND_NF,
    "2": NormalForm.THIRD_NF,
    "3": NormalForm.BCNF,
}


class SessionClosed(Exception):
    """Ввод закончился (EOF)"""


class ConsoleSession:
    """Сеанс работы с одним отношением через текстовое меню"""

    def __init__(self, input_stream: TextIO = None, output_stream: TextIO = None,
                 error_stream: TextIO = None):
        self.input_stream = input_stream or sys.stdin
        self.output_stream = output_stream or sys.stdout
        self.error_stream = error_stream or sys.stderr
        self.relation: Optional[Relation] = None
        self.pad = " " * CONFIG["DISPLAY"]["WIDTH"]

    # ------------------------------------------------------------ ввод/вывод

    def say(self, text: str = "") -> None:
        for line in text.split("\n"):
            self.output_stream.write(f"{self.pad}{line}\n" if line else "\n")

    def warn(self, text: str) -> None:
        self.error_stream.write(f"{text}\n")

    def ask(self, prompt: str) -> str:
        self.output_stream.write(f"{self.pad}{prompt}")
        self.output_stream.flush()
        line = self.input_stream.readline()
        if not line:
            raise SessionClosed()
        return remove_white_space(line.rstrip("\n"))

    def ask_valid(self, prompt: str, is_valid: Callable[[str], bool], error: str) -> str:
        value = self.ask(prompt)
        while not is_valid(value):
            self.say(error)
            value = self.ask(prompt)
        return value

    def ask_choice(self, prompt: str, choices: Iterable[str]) -> str:
        choices = {choice.lower() for choice in choices}
        return self.ask_valid(prompt, lambda value: value.lower() in choices,
                              "Ошибка: недопустимый выбор!").lower()

    def ask_yes_no(self, prompt: str) -> bool:
        return self.ask_choice(f"{prompt} [0-нет | 1-да]: ", ["0", "1"]) == "1"

    def ask_details(self) -> bool:
        return self.ask_yes_no("Показать промежуточные шаги?")

    # ----------------------------------------------------------------- меню

    def run(self) -> None:
        """Главный цикл программы"""
        self.say("Запуск программы")
        try:
            self.create_relation()
            while True:
                self.print_main_menu()
                choice = self.ask_choice("Ваш выбор: ", ["1", "2", "3", "4", "5", "6", "7", "q"])
                if choice == "q":
                    break
                self.dispatch_main(choice)
        except SessionClosed:
            self.say()
        self.say("Завершение работы")

    def print_main_menu(self) -> None:
        self.say()
        self.say("Главное меню")
        self.say("1. Редактировать отношение")
        self.say("2. Показать отношение")
        self.say("3. Потенциальные ключи")
        self.say("4. Проверить нормальную форму")
        self.say("5. Минимальное покрытие")
        self.say("6. Декомпозиция отношения")
        self.say("7. Отчет об анализе")
        self.say("[q - выход]")
        self.say()

    def dispatch_main(self, choice: str) -> None:
        if choice == "1":
            self.process_edit()
        elif choice == "2":
            self.say(str(self.relation))
        elif choice == "3":
            self.say(f"Потенциальные ключи: {format_key_set(self.relation.candidate_keys())}")
        elif choice == "4":
            self.process_normal()
        elif choice == "5":
            self.process_minimal_cover()
        elif choice == "6":
            self.process_decompose()
        elif choice == "7":
            self.say(NormalFormAnalyzer(self.relation).get_analysis_report())

    def print_edit_menu(self) -> None:
        self.say()
        self.say(f"Отношение: {self.relation}")
        self.say()
        self.say("Редактирование отношения")
        self.say("1. Добавить атрибуты")
        self.say("2. Добавить функциональные зависимости")
        self.say("3. Переименовать отношение")
        self.say("4. Удалить функциональную зависимость")
        self.say("5. Удалить атрибут")
        self.say("6. Удалить все атрибуты (удаляются и все зависимости)")
        self.say("7. Удалить все функциональные зависимости")
        self.say("8. Создать отношение заново")
        self.say("[c - назад]")
        self.say()

    def process_edit(self) -> None:
        while True:
            self.print_edit_menu()
            choice = self.ask_choice("Ваш выбор: ", ["1", "2", "3", "4", "5", "6", "7", "8", "c"])
            if choice == "c":
                return
            if choice == "1":
                self.process_add_attributes()
            elif choice == "2":
                self.process_add_dependencies()
            elif choice == "3":
                self.relation.name = self.ask_valid(
                    "Имя отношения: ", is_valid_name,
                    "Ошибка: имя должно начинаться с буквы и содержать только буквы, цифры и '_'")
                self.say("Отношение переименовано")
            elif choice == "4":
                self.process_remove_dependency()
            elif choice == "5":
                self.process_remove_attribute()
            elif choice == "6":
                if not self.relation.attributes:
                    self.say("Множество атрибутов пусто")
                elif self.ask_yes_no("Удалить все атрибуты и зависимости?"):
                    self.relation.clear_attributes()
            elif choice == "7":
                if not self.relation.dependencies:
                    self.say("Множество зависимостей пусто")
                elif self.ask_yes_no("Удалить все зависимости?"):
                    self.relation.clear_dependencies()
            elif choice == "8":
                if self.ask_yes_no("Удалить текущее отношение?"):
                    self.create_relation()

    # ------------------------------------------------------------- действия

    def create_relation(self) -> None:
        self.say()
        self.say("Создание отношения")
        name = self.ask_valid(
            "Имя отношения: ", is_valid_name,
            "Ошибка: имя должно начинаться с буквы и содержать только буквы, цифры и '_'")
        self.relation = Relation(name)
        if self.ask_yes_no("Добавить атрибуты?"):
            self.process_add_attributes()
        if self.ask_yes_no("Добавить зависимости?"):
            self.process_add_dependencies()

    def process_add_attributes(self) -> None:
        self.say("Атрибуты вводятся через ',' и начинаются с буквы, некорректные игнорируются")
        self.say("Пример: A, B, Cust_Name, PhoneNo1")
        attributes = parse_attributes(self.ask("Атрибуты: "))
        if not attributes:
            self.say("Корректных атрибутов не найдено")
            return

        if self.relation.add_attributes(attributes):
            self.say("Атрибуты добавлены")
        else:
            self.say("Новых атрибутов нет, все уже есть в отношении")
        self.say(f"Атрибуты: {format_attribute_set(self.relation.attributes)}")

    def process_add_dependencies(self) -> bool:
        self.say("Части зависимости разделяются '->', атрибуты - ',', зависимости - ';'")
        self.say("Пример: A, B -> C; Cust_No -> Cust_Name, Cust_Phn1")
        dependencies, errors = parse_dependencies(self.ask("Зависимости: "))
        for error in errors:
            self.warn(str(error))

        added = False
        for lhs, rhs in dependencies:
            text = f"{format_attribute_set(lhs)} -> {format_attribute_set(rhs)}"
            update = False
            if not (lhs | rhs).issubset(self.relation.attributes):
                self.say(f"Не все атрибуты зависимости '{text}' есть в отношении")
                update = self.ask_yes_no("Добавить недостающие атрибуты?")
                if not update:
                    continue

            stored = self.relation.add_dependency(lhs, rhs, update)
            if stored is not None:
                added = True
                self.say(f"Зависимость '{stored}' добавлена")
            else:
                self.say(f"Зависимость '{text}' не добавлена (тривиальная)")

        if added:
            self.say(f"Функциональные зависимости: {format_dependency_set(self.relation.dependencies)}")
        elif not dependencies:
            self.say("Корректных зависимостей не найдено")
        return added

    def process_remove_dependency(self) -> bool:
        if not self.relation.dependencies:
            self.say("Множество зависимостей пусто")
            return False

        self.say(f"Функциональные зависимости: {format_dependency_set(self.relation.dependencies)}")
        text = self.ask_valid("Удаляемая зависимость: ", is_valid_dependency,
                              "Ошибка: некорректная зависимость")
        try:
            lhs, rhs = parse_dependency(text)
        except InvalidDependencyError as e:
            self.warn(str(e))
            return False

        removed = self.relation.remove_dependency(lhs, rhs)
        self.say("Зависимость удалена" if removed else "Зависимость не найдена")
        return removed

    def process_remove_attribute(self) -> bool:
        if not self.relation.attributes:
            self.say("Множество атрибутов пусто")
            return False

        self.say(f"Атрибуты: {format_attribute_set(self.relation.attributes)}")
        name = self.ask_valid("Удаляемый атрибут: ", is_valid_name, "Ошибка: некорректный атрибут!")
        removed = self.relation.remove_attribute(name)
        self.say("Атрибут удален" if removed else "Атрибут не найден")
        return removed

    def process_normal(self) -> None:
        while True:
            self.say("Проверка нормальной формы")
            for key, form in NORMAL_FORM_CHOICES.items():
                self.say(f"{key}. {NORMAL_FORM_NAMES[form]}")
            self.say("[c - назад]")
            choice = self.ask_choice("Ваш выбор: ", ["1", "2", "3", "c"])
            if choice == "c":
                return

            form = NORMAL_FORM_CHOICES[choice]
            self.say(f"Потенциальные ключи: {format_key_set(self.relation.candidate_keys())}")
            violations = self.relation.violations(form)
            if not violations:
                self.say(f"Отношение находится в форме: {NORMAL_FORM_NAMES[form]}")
            else:
                self.say(f"Отношение не находится в форме: {NORMAL_FORM_NAMES[form]}")
                self.say(f"Нарушающие зависимости: {format_dependency_set(violations)}")
            self.say()

    def process_minimal_cover(self) -> None:
        if not self.relation.dependencies:
            self.say("Множество зависимостей пусто")
            return

        self.say(f"Исходные зависимости: {format_dependency_set(self.relation.dependencies)}")
        cover = self.relation.minimal_cover(self.ask_details())
        self.say(f"Минимальное покрытие: {format_dependency_set(cover)}")

    def process_decompose(self) -> None:
        if not self.relation.attributes:
            self.say("Множество атрибутов пусто")
            return

        self.say("Декомпозиция отношения")
        self.say("0. Без потерь, без сохранения зависимостей (гарантирует НФБК)")
        self.say("1. Без потерь, с сохранением зависимостей (гарантирует не ниже 3НФ)")
        preserving = self.ask_choice("Ваш выбор: ", ["0", "1"]) == "1"
        verbose = self.ask_details()

        if preserving:
            result = Decomposer.decompose_to_3nf(self.relation, verbose)
        else:
            result = Decomposer.decompose_to_bcnf(self.relation, verbose)

        if not result.was_decomposed():
            self.say("Декомпозиция не требуется, отношение уже в нужной нормальной форме")
            self.say(str(self.relation))
            return

        self.say("Результирующие отношения:")
        self.say(format_relation_set(result.decomposed_relations, width=0))
        if result.lost_dependencies:
            self.say(f"Потерянные зависимости: {format_dependency_set(result.lost_dependencies)}")


def main() -> int:
    setup_logging()
    session = ConsoleSession()
    try:
        session.run()
    except KeyboardInterrupt:
        logger.info("Прервано пользователем")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
