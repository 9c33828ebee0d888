"""
Доступ к устройству, на котором рендерятся темы
"""
import shlex
import shutil
import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union


ADB = "adb"  # по умолчанию ищется в PATH
ADB_TIMEOUT = 60

EMULATOR_PREFIX = "emulator-"
STORAGE_PATH_DEVICE = "/storage/emulated/legacy/cts-holo-assets/{name}.png"
STORAGE_PATH_EMULATOR = "/sdcard/cts-holo-assets/{name}.png"


class DeviceError(RuntimeError):
    """Ошибка обмена с устройством"""


def storage_path_for(serial: str) -> str:
    """
    Шаблон пути к сгенерированным изображениям на устройстве.
    Эмулятор определяется по серийному номеру.

    :param serial: серийный номер устройства
    :return: шаблон с плейсхолдером {name}
    """
    if serial.startswith(EMULATOR_PREFIX):
        return STORAGE_PATH_EMULATOR
    return STORAGE_PATH_DEVICE


class Device(ABC):
    """Минимальный интерфейс устройства для задач сравнения"""

    def __init__(self, serial: str):
        self.serial_number = serial

    @abstractmethod
    def does_file_exist(self, remote: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def pull_file(self, remote: str, local: Union[str, Path]) -> None:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.serial_number!r})"


class AdbDevice(Device):
    """Устройство или эмулятор, доступное через adb"""

    def __init__(self, serial: str, adb: Optional[str] = None, timeout: int = ADB_TIMEOUT):
        super().__init__(serial)
        self.adb = adb or shutil.which(ADB) or ADB
        self.timeout = timeout

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self.adb, "-s", self.serial_number, *args]
        try:
            return subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise DeviceError(f"adb не ответил за {self.timeout} с: {' '.join(cmd)}") from e
        except OSError as e:
            raise DeviceError(f"Не удалось запустить {self.adb}: {e}") from e

    def does_file_exist(self, remote: str) -> bool:
        try:
            result = self._run("shell", f"ls {shlex.quote(remote)}")
        except DeviceError as e:
            logging.error(f"{self.serial_number}: {e}")
            return False
        output = result.stdout + result.stderr
        return result.returncode == 0 and "No such file" not in output

    def pull_file(self, remote: str, local: Union[str, Path]) -> None:
        result = self._run("pull", remote, str(local))
        if result.returncode != 0:
            raise DeviceError(
                f"adb pull {remote} завершился с кодом {result.returncode}: {result.stderr.strip()}"
            )


class LocalDevice(Device):
    """
    Локальная копия хранилища устройства: удалённые пути
    отображаются внутрь каталога root.
    """

    def __init__(self, root: Union[str, Path], serial: str = "local"):
        super().__init__(serial)
        self.root = Path(root)

    def local_path(self, remote: str) -> Path:
        return self.root / remote.lstrip("/")

    def does_file_exist(self, remote: str) -> bool:
        return self.local_path(remote).is_file()

    def pull_file(self, remote: str, local: Union[str, Path]) -> None:
        try:
            shutil.copyfile(self.local_path(remote), local)
        except OSError as e:
            raise DeviceError(f"Не удалось скопировать {remote}: {e}") from e
