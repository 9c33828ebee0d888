"""
Попиксельное сравнение изображений с допуском по каналам
"""
import numpy as np
from typing import Optional, Tuple


IMAGE_THRESHOLD = 2
# Высота полосы строк, проверяемой за один шаг (ранний выход по полосам)
ROWS_PER_STRIP = 64


def _check_threshold(threshold: int) -> None:
    if threshold < 0:
        raise ValueError(f"Порог не может быть отрицательным: {threshold}")


def first_mismatch(
    reference: np.ndarray,
    candidate: np.ndarray,
    threshold: int = IMAGE_THRESHOLD
) -> Optional[Tuple[int, int]]:
    """
    Ищет первый пиксель (в порядке строк), где разность хотя бы одного
    канала по модулю больше порога.

    Каналы расширяются до int16 до вычитания, поэтому 0 против 255
    не может "завернуться". Сканирование идёт полосами по ROWS_PER_STRIP
    строк и останавливается на первой полосе с расхождением.

    :param reference: эталон, (h, w, 4) uint8
    :param candidate: кандидат того же размера
    :param threshold: допустимая разность по каналу (включительно)
    :return: (x, y) первого расхождения или None
    """
    _check_threshold(threshold)
    if reference.shape[:2] != candidate.shape[:2]:
        raise ValueError(
            f"Размеры не совпадают: {reference.shape[:2]} vs {candidate.shape[:2]}"
        )

    h = reference.shape[0]
    for top in range(0, h, ROWS_PER_STRIP):
        a = reference[top:top + ROWS_PER_STRIP].astype(np.int16)
        b = candidate[top:top + ROWS_PER_STRIP].astype(np.int16)
        failed = (np.abs(a - b) > threshold).any(axis=-1)
        if failed.any():
            y, x = np.argwhere(failed)[0]
            return int(x), int(top + y)
    return None


def compare(
    reference: np.ndarray,
    candidate: np.ndarray,
    threshold: int = IMAGE_THRESHOLD
) -> bool:
    """
    Сравнивает два изображения позиция в позицию.

    Разные размеры -> False без просмотра пикселей. Иначе False, если
    у какого-либо пикселя разность любого канала (включая альфу) больше
    порога.

    :param reference: эталонное изображение BGRA
    :param candidate: сгенерированное изображение BGRA
    :param threshold: допуск по каналу, >= 0
    :return: True если изображения совпадают
    """
    _check_threshold(threshold)
    if reference.shape[:2] != candidate.shape[:2]:
        return False
    return first_mismatch(reference, candidate, threshold) is None
