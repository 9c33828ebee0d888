"""
CLI интерфейс для themediff
"""
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .core.compare import IMAGE_THRESHOLD, compare, first_mismatch
from .core.io import safe_imread, safe_imwrite
from .core.render import render
from .device import ADB, AdbDevice, LocalDevice
from .task import DEFAULT_WORKERS, ComparisonTask, run_comparisons


LOGFILE = "themediff.log"

app = typer.Typer(help="themediff - сравнение снимков тем с эталонами")
console = Console()


def setup_logging(logfile: Path) -> None:
    """Настройка логирования в файл"""
    logging.basicConfig(
        filename=str(logfile),
        filemode='a',
        format='%(asctime)s %(levelname)s: %(message)s',
        level=logging.INFO
    )


@app.callback()
def main_callback(
    log_file: Path = typer.Option(LOGFILE, "--log-file", envvar="THEMEDIFF_LOG_FILE", help="Файл журнала"),
):
    setup_logging(log_file)


@app.command("compare")
def compare_cmd(
    reference: Path = typer.Argument(..., help="Эталонное изображение"),
    candidate: Path = typer.Argument(..., help="Сгенерированное изображение"),
    threshold: int = typer.Option(IMAGE_THRESHOLD, "--threshold", "-t", min=0, envvar="THEMEDIFF_THRESHOLD", help="Допуск по каналу (0-255)"),
    output: Path = typer.Option("diff.png", "--output", "-o", help="Куда сохранить diff при расхождении"),
):
    """
    Сравнивает два изображения. Код выхода 0 - совпадают, 1 - нет, 2 - ошибка чтения.
    """
    ref = safe_imread(reference)
    gen = safe_imread(candidate)
    if ref is None or gen is None:
        console.print("[red]Ошибка: не удалось загрузить изображения[/red]")
        raise typer.Exit(2)

    if compare(ref, gen, threshold):
        console.print("[green]Совпадают[/green]")
        return

    if ref.shape[:2] != gen.shape[:2]:
        console.print(
            f"[yellow]Размеры не совпадают: {ref.shape[1]}x{ref.shape[0]} vs {gen.shape[1]}x{gen.shape[0]}[/yellow]"
        )
    else:
        x, y = first_mismatch(ref, gen, threshold)
        console.print(f"[yellow]Первое расхождение в ({x}, {y})[/yellow]")

    if safe_imwrite(output, render(ref, gen)):
        console.print(f"Diff сохранён в {output}")
    else:
        console.print(f"[red]Ошибка при сохранении {output}[/red]")
    raise typer.Exit(1)


@app.command("render")
def render_cmd(
    image1: Path = typer.Argument(..., help="Первое изображение"),
    image2: Path = typer.Argument(..., help="Второе изображение"),
    output: Path = typer.Option("diff.png", "--output", "-o", help="Путь для сохранения триптиха"),
):
    """
    Строит триптих (первое | второе | вердикт) без проверки допуска.
    """
    img1 = safe_imread(image1)
    img2 = safe_imread(image2)
    if img1 is None or img2 is None:
        console.print("[red]Ошибка: не удалось загрузить изображения[/red]")
        raise typer.Exit(2)

    if not safe_imwrite(output, render(img1, img2)):
        console.print(f"[red]Ошибка при сохранении {output}[/red]")
        raise typer.Exit(1)
    console.print(f"Сохранено в {output}")


@app.command()
def check(
    reference_dir: Path = typer.Argument(..., help="Каталог с эталонными PNG"),
    serial: str = typer.Option("emulator-5554", "--serial", "-s", envvar="ANDROID_SERIAL", help="Серийный номер устройства"),
    root: Optional[Path] = typer.Option(None, "--root", help="Локальная копия хранилища устройства вместо adb"),
    adb: str = typer.Option(ADB, "--adb", envvar="THEMEDIFF_ADB", help="Путь к adb"),
    threshold: int = typer.Option(IMAGE_THRESHOLD, "--threshold", "-t", min=0, envvar="THEMEDIFF_THRESHOLD", help="Допуск по каналу"),
    diff_dir: Optional[Path] = typer.Option(None, "--diff-dir", help="Каталог для diff-файлов (по умолчанию temp)"),
    workers: int = typer.Option(DEFAULT_WORKERS, "--workers", "-w", min=1, envvar="THEMEDIFF_WORKERS", help="Число потоков"),
):
    """
    Сравнивает все эталоны каталога с изображениями на устройстве.
    """
    if not reference_dir.is_dir():
        console.print(f"[red]Ошибка: {reference_dir} не является директорией[/red]")
        raise typer.Exit(2)

    if root is not None:
        device = LocalDevice(root, serial=serial)
    else:
        device = AdbDevice(serial, adb=adb)

    references = sorted(reference_dir.glob("*.png"))
    console.print(f"Найдено {len(references)} эталонов, устройство {device.serial_number}")
    logging.info(f"Проверка {len(references)} эталонов из {reference_dir} на {device!r}")

    tasks = [
        ComparisonTask(device, ref, ref.stem, threshold=threshold, diff_dir=diff_dir)
        for ref in references
    ]
    with console.status("Сравнение..."):
        results = run_comparisons(tasks, workers=workers)

    table = Table(title="Результаты")
    table.add_column("Имя")
    table.add_column("Результат")
    table.add_column("Diff")
    for task in tasks:
        ok = results[task.name]
        status = "[green]OK[/green]" if ok else "[red]FAIL[/red]"
        table.add_row(task.name, status, str(task.diff_path or ""))
    console.print(table)

    failed = sum(1 for ok in results.values() if not ok)
    console.print(f"\nСовпало: {len(results) - failed}, расхождений: {failed}")
    if failed:
        raise typer.Exit(1)


def main():
    """Точка входа CLI"""
    app()


if __name__ == "__main__":
    main()
