"""
Чтение/запись растровых файлов и временные файлы задач
"""
import os
import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

import cv2
import numpy as np

from .raster import as_raster


PathLike = Union[str, Path]


def safe_imread(path: PathLike) -> Optional[np.ndarray]:
    """
    Безопасное чтение изображения с поддержкой кириллицы в путях.
    Альфа-канал сохраняется, результат приводится к BGRA.

    :param path: путь к файлу
    :return: RasterImage или None, если файл не читается / повреждён
    """
    try:
        with open(path, 'rb') as f:
            img_array = np.frombuffer(f.read(), dtype=np.uint8)
        img = cv2.imdecode(img_array, cv2.IMREAD_UNCHANGED)
    except (OSError, cv2.error) as e:
        logging.error(f"Не удалось прочитать {path}: {e}")
        return None

    if img is None:
        logging.error(f"Не удалось декодировать {path}")
        return None

    try:
        return as_raster(img)
    except ValueError as e:
        logging.error(f"Неподдерживаемое изображение {path}: {e}")
        return None


def safe_imwrite(path: PathLike, img: np.ndarray) -> bool:
    """
    Безопасная запись изображения с поддержкой кириллицы.

    :param path: путь к файлу
    :param img: изображение
    :return: успешность операции
    """
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)

        ext = Path(path).suffix.lower()
        if ext not in ['.png', '.bmp', '.tiff', '.tif']:
            ext = '.png'

        success, buffer = cv2.imencode(ext, img)
        if not success:
            logging.error(f"Не удалось закодировать {path}")
            return False
        with open(path, 'wb') as f:
            f.write(buffer)
        return True
    except (OSError, cv2.error) as e:
        logging.error(f"Ошибка записи {path}: {e}")
        return False


def unique_path(prefix: str, suffix: str = ".png", directory: Optional[PathLike] = None) -> Path:
    """
    Создаёт пустой файл с уникальным именем и возвращает путь к нему.

    :param prefix: начало имени
    :param suffix: расширение
    :param directory: каталог (по умолчанию системный temp)
    :return: путь к созданному файлу
    """
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
    os.close(fd)
    return Path(name)


@contextmanager
def scratch_file(prefix: str, suffix: str = ".png") -> Iterator[Path]:
    """
    Временный файл на время одной задачи; удаляется при любом выходе.

    :param prefix: начало имени
    :param suffix: расширение
    """
    path = unique_path(prefix, suffix)
    try:
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
