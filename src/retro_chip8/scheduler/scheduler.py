# retro_chip8/scheduler/scheduler.py
"""
スケジューラモジュール。

命令タスク（既定500Hz）とタイマータスク（既定60Hz）の2つの周期タスクを独立したスレッドで実行し、
停止命令または致命的エラーで両方のタスクを終了させる責務を負います。
"""
import logging
import threading
import time
from typing import Callable, Optional

from retro_chip8.core.errors import Chip8Error
from retro_chip8.core.machine import Machine

logger = logging.getLogger(__name__)

DEFAULT_CPU_HZ = 500.0
DEFAULT_TIMER_HZ = 60.0


# @intent:utility_function 周期の残り時間を返します。作業が周期を超過した場合は0です。
def remaining_period(period: float, elapsed: float) -> float:
    return max(0.0, period - elapsed)


# @intent:responsibility 1つの作業関数を一定周期で繰り返し実行するスレッドを管理します。
class PeriodicTask:
    """
    周期はタスク開始時刻から計測し、`period - 作業時間` だけ待機します（負の値は0に切り詰め）。
    作業関数が例外を送出した場合、ループを抜けて`on_error`に通知します。
    """
    def __init__(self, name: str, frequency: float, work: Callable[[], None],
                 stop_event: threading.Event, on_error: Callable[[BaseException], None],
                 clock: Callable[[], float] = time.perf_counter):
        if frequency <= 0:
            raise ValueError(f"Task frequency must be positive, got {frequency}.")
        self.name = name
        self.period = 1.0 / frequency
        self.iterations = 0
        self._work = work
        self._stop_event = stop_event
        self._on_error = on_error
        self._clock = clock
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        logger.debug(f"{self.name} started at {1.0 / self.period:.1f} Hz")
        try:
            while not self._stop_event.is_set():
                started = self._clock()
                self._work()
                self.iterations += 1
                self._stop_event.wait(remaining_period(self.period, self._clock() - started))
        except Exception as e:
            self._on_error(e)
        logger.debug(f"{self.name} stopped after {self.iterations} iterations")


# @intent:responsibility 命令タスクとタイマータスクを共有Machineに対して並行実行します。
class Scheduler:
    """
    2つのタスクは互いに排他的（Machineのロックによる）ですが、順序は規定されません。

    on_sound_off: サウンドタイマーが1から0になった時にタイマースレッドから呼ばれます。
    on_terminate: 停止命令（引数None）または致命的エラー（引数は例外）で一度だけ呼ばれます。
    """
    def __init__(self, machine: Machine,
                 cpu_hz: float = DEFAULT_CPU_HZ,
                 timer_hz: float = DEFAULT_TIMER_HZ,
                 on_sound_off: Optional[Callable[[], None]] = None,
                 on_terminate: Optional[Callable[[Optional[BaseException]], None]] = None):
        self._machine = machine
        self._on_sound_off = on_sound_off
        self._on_terminate = on_terminate
        self._stop_event = threading.Event()
        self._terminate_lock = threading.Lock()
        self._terminated = False
        self._error: Optional[BaseException] = None
        self._started = False

        self.instruction_task = PeriodicTask(
            "instruction-task", cpu_hz, self._instruction_cycle, self._stop_event, self._terminate
        )
        self.timer_task = PeriodicTask(
            "timer-task", timer_hz, self._timer_cycle, self._stop_event, self._terminate
        )

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def is_running(self) -> bool:
        return self._started and not self._stop_event.is_set()

    def start(self) -> None:
        if self._started:
            raise RuntimeError("Scheduler has already been started.")
        self._started = True
        logger.info("Scheduler starting")
        self.instruction_task.start()
        self.timer_task.start()

    # @intent:responsibility 両タスクに停止を要求します。on_terminateは呼ばれません。
    def stop(self) -> None:
        self._stop_event.set()

    # @intent:responsibility 停止（停止命令、エラー、stop()のいずれか）まで待機します。
    # @intent:return タイムアウト前に停止した場合True。
    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._stop_event.wait(timeout)

    def join(self, timeout: Optional[float] = None) -> None:
        self.instruction_task.join(timeout)
        self.timer_task.join(timeout)

    def _instruction_cycle(self) -> None:
        snapshot = self._machine.step()
        if snapshot.halted:
            self._terminate(None)

    def _timer_cycle(self) -> None:
        if self._machine.tick_timers() and self._on_sound_off is not None:
            self._on_sound_off()

    def _terminate(self, error: Optional[BaseException]) -> None:
        with self._terminate_lock:
            if self._terminated:
                return
            self._terminated = True
            self._error = error
            self._stop_event.set()

        if error is None:
            logger.info("Program halted")
        elif isinstance(error, Chip8Error):
            logger.error(f"Execution stopped: {error}")
        else:
            logger.error("Execution stopped by unexpected error", exc_info=error)

        if self._on_terminate is not None:
            self._on_terminate(error)
