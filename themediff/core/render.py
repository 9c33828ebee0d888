"""
Отрисовка диффа-триптиха: эталон | кандидат | вердикт
"""
import numpy as np
from typing import NamedTuple, Tuple

from .raster import WHITE, RED, BLUE, GREEN, MAGENTA


Color = Tuple[int, int, int, int]


class DiffPalette(NamedTuple):
    """Цвета триптиха (BGRA)"""
    background: Color = WHITE
    mismatch: Color = RED
    only_first: Color = BLUE
    only_second: Color = GREEN
    outside: Color = MAGENTA


DEFAULT_PALETTE = DiffPalette()


def _bounds_mask(w: int, h: int, width: int, height: int) -> np.ndarray:
    """Маска (height, width): True там, где (x, y) внутри изображения w x h"""
    ys = np.arange(height)[:, None] < h
    xs = np.arange(width)[None, :] < w
    return ys & xs


def render(
    image1: np.ndarray,
    image2: np.ndarray,
    palette: DiffPalette = DEFAULT_PALETTE
) -> np.ndarray:
    """
    Строит триптих из двух изображений.

    Ширина результата 3 * max(w1, w2), высота max(h1, h2). Первая полоса -
    image1, вторая - image2 (вне границ - фон), третья - вердикт:
    совпадающий пиксель как есть, иначе mismatch; only_first / only_second
    там, где пиксель есть только в одном изображении; outside там, где его
    нет ни в одном.

    :param image1: эталон BGRA
    :param image2: кандидат BGRA
    :param palette: цвета фона и маркеров
    :return: триптих (h, 3w, 4) uint8
    """
    h1, w1 = image1.shape[:2]
    h2, w2 = image2.shape[:2]
    width = max(w1, w2)
    height = max(h1, h2)

    diff = np.empty((height, width * 3, 4), dtype=np.uint8)
    first = diff[:, :width]
    second = diff[:, width:2 * width]
    verdict = diff[:, 2 * width:]

    first[...] = palette.background
    first[:h1, :w1] = image1
    second[...] = palette.background
    second[:h2, :w2] = image2

    in1 = _bounds_mask(w1, h1, width, height)
    in2 = _bounds_mask(w2, h2, width, height)
    verdict[...] = palette.outside
    verdict[in1 & ~in2] = palette.only_first
    verdict[~in1 & in2] = palette.only_second

    # Общая область: побитовое равенство всех четырёх каналов
    oh, ow = min(h1, h2), min(w1, w2)
    a = image1[:oh, :ow]
    b = image2[:oh, :ow]
    same = np.all(a == b, axis=-1)
    verdict[:oh, :ow] = np.where(
        same[..., None], a, np.asarray(palette.mismatch, dtype=np.uint8)
    )

    return diff
