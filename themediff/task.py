"""
Задача сравнения: эталон из файла против изображения с устройства
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import numpy as np

from .core.compare import IMAGE_THRESHOLD, compare, first_mismatch
from .core.io import safe_imread, safe_imwrite, scratch_file, unique_path
from .core.render import DEFAULT_PALETTE, DiffPalette, render
from .device import Device, storage_path_for


DEFAULT_WORKERS = 4


class ComparisonTask:
    """
    Сравнивает эталонное изображение с тем, что сгенерировало устройство.

    Вызов возвращает True при совпадении. При расхождении сохраняет
    триптих и кладёт путь к нему в diff_path. Любая ошибка (нет файла,
    файл не читается, сбой устройства) даёт False и не выходит наружу.
    """

    def __init__(
        self,
        device: Device,
        reference: Union[str, Path],
        name: str,
        threshold: int = IMAGE_THRESHOLD,
        diff_dir: Optional[Union[str, Path]] = None,
        palette: DiffPalette = DEFAULT_PALETTE,
    ):
        self.device = device
        self.reference = Path(reference)
        self.name = name
        self.threshold = threshold
        self.diff_dir = Path(diff_dir) if diff_dir else None
        self.palette = palette
        self.storage_path = storage_path_for(device.serial_number)
        self.diff_path: Optional[Path] = None

    @property
    def remote_path(self) -> str:
        return self.storage_path.format(name=self.name)

    def __call__(self) -> bool:
        success = False
        remote = self.remote_path
        with scratch_file(f"gen_{self.name}") as generated:
            try:
                if not self.device.does_file_exist(remote):
                    logging.error(f"Файл {remote} не сохранён на устройстве {self.device.serial_number}")
                    return False
                self.device.pull_file(remote, generated)

                ref = safe_imread(self.reference)
                gen = safe_imread(generated)
                if ref is None or gen is None:
                    logging.error(f"{self.name}: не удалось загрузить изображения")
                    return False

                if compare(ref, gen, self.threshold):
                    success = True
                else:
                    self._report_mismatch(ref, gen)
            except Exception:
                logging.exception(f"{self.name}: ошибка сравнения ({remote})")
        return success

    def _report_mismatch(self, ref: np.ndarray, gen: np.ndarray) -> None:
        if ref.shape[:2] != gen.shape[:2]:
            logging.info(
                f"{self.name}: размеры не совпадают ({ref.shape[1]}x{ref.shape[0]} vs {gen.shape[1]}x{gen.shape[0]})"
            )
        else:
            x, y = first_mismatch(ref, gen, self.threshold)
            logging.info(f"{self.name}: первое расхождение в ({x}, {y})")

        diff = render(ref, gen, self.palette)
        if self.diff_dir is not None:
            out = self.diff_dir / f"diff_{self.name}.png"
        else:
            out = unique_path(f"diff_{self.name}")
        if safe_imwrite(out, diff):
            self.diff_path = out
            logging.info(f"Diff создан: {out}")
        else:
            logging.error(f"{self.name}: не удалось сохранить diff в {out}")
            if self.diff_dir is None:
                out.unlink(missing_ok=True)


def run_comparisons(
    tasks: Iterable[ComparisonTask],
    workers: int = DEFAULT_WORKERS
) -> Dict[str, bool]:
    """
    Параллельно выполняет независимые задачи сравнения.

    :param tasks: задачи
    :param workers: число потоков
    :return: {имя задачи: результат} в порядке подачи
    :raises ValueError: если имена задач повторяются
    """
    tasks = list(tasks)
    names = [task.name for task in tasks]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Повторяющиеся имена задач: {', '.join(duplicates)}")

    results: Dict[str, bool] = {}
    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        futures = [(task, pool.submit(task)) for task in tasks]
        for task, future in futures:
            try:
                results[task.name] = future.result()
            except Exception:
                logging.exception(f"{task.name}: задача завершилась с ошибкой")
                results[task.name] = False
    return results
