# src/retro_chip8/scheduler/__init__.py
"""
周期タスクスケジューラパッケージ。
"""
from .scheduler import Scheduler, PeriodicTask, remaining_period, DEFAULT_CPU_HZ, DEFAULT_TIMER_HZ
