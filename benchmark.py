"""
Замеры времени работы алгоритмов на случайных отношениях
"""
import random
import time
from typing import Callable, Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from config import CONFIG, get_logger, setup_logging
from decomposition import Decomposer
from fd_algorithms import FDAlgorithms
from models import Relation

logger = get_logger(__name__)

OPERATIONS: Dict[str, Callable[[Relation], object]] = {
    "candidate_keys": FDAlgorithms.find_candidate_keys,
    "minimal_cover": lambda rel: FDAlgorithms.minimal_cover(rel.dependencies),
    "bcnf": Decomposer.decompose_to_bcnf,
    "synthesis": Decomposer.decompose_to_3nf,
}

OPERATION_LABELS = {
    "candidate_keys": "Поиск потенциальных ключей",
    "minimal_cover": "Минимальное покрытие",
    "bcnf": "Декомпозиция в НФБК",
    "synthesis": "Синтез 3НФ",
}


def generate_random_relation(n_attributes: int, n_dependencies: int,
                             seed: Optional[int] = None,
                             max_lhs: Optional[int] = None,
                             max_rhs: Optional[int] = None) -> Relation:
    """
    Сгенерировать случайное отношение

    Args:
        n_attributes: Количество атрибутов (не меньше 2)
        n_dependencies: Количество генерируемых зависимостей; зависимости
            с совпавшей левой частью объединяются, поэтому в отношении их
            может оказаться меньше
        seed: Зерно генератора для воспроизводимости
        max_lhs: Наибольший размер левой части
        max_rhs: Наибольший размер правой части
    """
    if n_attributes < 2:
        raise ValueError("Для генерации зависимостей нужно не меньше двух атрибутов")
    if n_dependencies < 0:
        raise ValueError("Количество зависимостей не может быть отрицательным")

    settings = CONFIG["BENCHMARK"]
    max_lhs = max_lhs or settings["MAX_LHS_SIZE"]
    max_rhs = max_rhs or settings["MAX_RHS_SIZE"]

    rng = random.Random(seed)
    attributes = [f"a{i}" for i in range(1, n_attributes + 1)]
    relation = Relation(f"R{n_attributes}", attributes)

    for _ in range(n_dependencies):
        lhs_size = rng.randint(1, min(max_lhs, n_attributes - 1))
        lhs = rng.sample(attributes, lhs_size)
        rest = [attr for attr in attributes if attr not in lhs]
        rhs = rng.sample(rest, rng.randint(1, min(max_rhs, len(rest))))
        relation.add_dependency(lhs, rhs, update=False)

    return relation


def time_operation(operation: Callable[[Relation], object], relation: Relation,
                   repeats: int) -> float:
    """Среднее время выполнения операции в секундах"""
    timings = []
    for _ in range(repeats):
        start = time.perf_counter()
        operation(relation)
        timings.append(time.perf_counter() - start)
    return float(np.mean(timings))


def run_benchmark(attribute_counts: Optional[Sequence[int]] = None,
                  n_dependencies: Optional[int] = None,
                  repeats: Optional[int] = None,
                  seed: Optional[int] = None) -> Dict[str, np.ndarray]:
    """
    Замерить время всех операций для каждого количества атрибутов

    Returns:
        Словарь: "n_attributes" - количества атрибутов, для каждой операции
        из OPERATIONS - массив средних времен
    """
    settings = CONFIG["BENCHMARK"]
    attribute_counts = list(attribute_counts or settings["ATTRIBUTE_COUNTS"])
    n_dependencies = settings["DEPENDENCY_COUNT"] if n_dependencies is None else n_dependencies
    repeats = repeats or settings["REPEATS"]
    seed = settings["SEED"] if seed is None else seed

    timings: Dict[str, List[float]] = {name: [] for name in OPERATIONS}
    for n_attributes in attribute_counts:
        relation = generate_random_relation(n_attributes, n_dependencies, seed)
        logger.debug("Сгенерировано отношение: %s", relation)
        for name, operation in OPERATIONS.items():
            elapsed = time_operation(operation, relation, repeats)
            timings[name].append(elapsed)
            logger.info("N=%d %s: %.6f с", n_attributes, OPERATION_LABELS[name], elapsed)

    results = {"n_attributes": np.array(attribute_counts)}
    for name, values in timings.items():
        results[name] = np.array(values)
    return results


def plot_benchmark(results: Dict[str, np.ndarray], show: bool = True,
                   save_path: Optional[str] = None):
    """Построить график зависимости времени выполнения от количества атрибутов"""
    n_values = results["n_attributes"]
    styles = {
        "candidate_keys": ("o", "-", "dodgerblue"),
        "minimal_cover": ("s", "--", "orangered"),
        "bcnf": ("^", ":", "green"),
        "synthesis": ("D", "-.", "purple"),
    }

    fig, ax = plt.subplots(figsize=(12, 7))
    for name, (marker, linestyle, color) in styles.items():
        if name in results:
            ax.plot(n_values, results[name], marker=marker, linestyle=linestyle,
                    color=color, label=OPERATION_LABELS[name])

    ax.set_title("Зависимость времени выполнения от количества атрибутов (N)", fontsize=16)
    ax.set_xlabel("Количество атрибутов (N)", fontsize=12)
    ax.set_ylabel("Время выполнения (секунды)", fontsize=12)
    ax.set_xticks(n_values)
    ax.legend()
    ax.grid(True, which="both", ls="--", linewidth=0.5)
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path)
    if show:
        plt.show()
    return fig


def main() -> None:
    setup_logging()
    results = run_benchmark()
    plot_benchmark(results)


if __name__ == "__main__":
    main()
