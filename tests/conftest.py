"""
Конфигурация pytest
"""
import cv2
import numpy as np
import pytest


def pytest_configure(config):
    """Регистрируем маркеры"""
    config.addinivalue_line(
        "markers", "benchmark: бенчмарк-тесты производительности"
    )


def make_img(w=2, h=2, color=(10, 20, 30, 255)):
    """BGRA изображение w x h, залитое одним цветом"""
    return np.full((h, w, 4), color, dtype=np.uint8)


@pytest.fixture
def identical_images():
    """Пара идентичных изображений 2x2"""
    img = make_img()
    return img, img.copy()


@pytest.fixture
def write_png(tmp_path):
    """Записывает BGRA изображение в PNG и возвращает путь"""
    def _write(name, img):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        assert cv2.imwrite(str(path), img)
        return path
    return _write
