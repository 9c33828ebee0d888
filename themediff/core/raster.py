"""
Растровые изображения: приведение к BGRA и фиксированные цвета
"""
import cv2
import numpy as np
from typing import Tuple


# Цвета в порядке BGRA (как у OpenCV), все непрозрачные
WHITE = (255, 255, 255, 255)
RED = (0, 0, 255, 255)
BLUE = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
MAGENTA = (255, 0, 255, 255)


def bgra(r: int, g: int, b: int, a: int = 255) -> Tuple[int, int, int, int]:
    """RGB(A) -> BGRA"""
    return (b, g, r, a)


def as_raster(img: np.ndarray) -> np.ndarray:
    """
    Приводит декодированный буфер к каноническому RasterImage.

    Результат: массив (h, w, 4) uint8 в порядке BGRA, только для чтения.
    Серое изображение расширяется до BGRA, у BGR добавляется непрозрачная
    альфа, 16-битные каналы урезаются до старшего байта.

    :param img: массив (h, w), (h, w, 1), (h, w, 3) или (h, w, 4)
    :return: BGRA изображение только для чтения
    """
    if not isinstance(img, np.ndarray):
        raise ValueError(f"Ожидался numpy.ndarray, получено {type(img).__name__}")

    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif img.dtype != np.uint8:
        raise ValueError(f"Неподдерживаемый тип каналов: {img.dtype}")

    if img.ndim == 3 and img.shape[2] == 1:
        img = img[..., 0]

    if img.ndim == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGRA)
    elif img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)
    elif img.ndim == 3 and img.shape[2] == 4:
        img = img.copy()
    else:
        raise ValueError(f"Неподдерживаемая форма изображения: {img.shape}")

    img = np.ascontiguousarray(img)
    img.flags.writeable = False
    return img
