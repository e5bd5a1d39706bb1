# grounded_rag/crosscutting/timing.py
"""
===============================================================================
MÓDULO: Timing utilities (Timer + StageTimings)
===============================================================================

Objetivo
--------
Medición simple de tiempos por etapa del pipeline (embed / retrieve / llm):
- Timer (context manager)
- StageTimings (acumula etapas repetidas, ej: intento + reparación del LLM)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componentes:
  - Timer
  - StageTimings

Responsabilidades:
  - Medir elapsed time sin dependencias externas
  - Exponer resultados en ms para logs
===============================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Timer:
    """Mide elapsed time con perf_counter (manual o como context manager)."""

    _start_time: Optional[float] = field(default=None, repr=False)
    _end_time: Optional[float] = field(default=None, repr=False)

    def start(self) -> "Timer":
        self._start_time = time.perf_counter()
        self._end_time = None
        return self

    def stop(self) -> "Timer":
        if self._start_time is None:
            raise RuntimeError("Timer no iniciado")
        self._end_time = time.perf_counter()
        return self

    @property
    def elapsed_seconds(self) -> float:
        if self._start_time is None:
            return 0.0
        end = self._end_time or time.perf_counter()
        return end - self._start_time

    @property
    def elapsed_ms(self) -> float:
        return round(self.elapsed_seconds * 1000, 2)

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()


@dataclass
class StageTimings:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      StageTimings

    Responsabilidades:
      - Medir tiempos por etapa (sumando si una etapa se repite)
      - Exponer diccionario con {stage}_ms, {stage}_calls y total_ms

    Colaboradores:
      - Use cases (AnswerQueryUseCase, IngestTextUseCase)
    ----------------------------------------------------------------------------
    """

    _stages: dict[str, float] = field(default_factory=dict)
    _calls: dict[str, int] = field(default_factory=dict)
    _total_timer: Timer = field(default_factory=Timer)

    def __post_init__(self) -> None:
        self._total_timer.start()

    def measure(self, stage_name: str) -> "_StageTimer":
        return _StageTimer(stage_name, self)

    def record(self, stage_name: str, elapsed_ms: float) -> None:
        self._stages[stage_name] = round(
            self._stages.get(stage_name, 0.0) + elapsed_ms, 2
        )
        self._calls[stage_name] = self._calls.get(stage_name, 0) + 1

    def calls(self, stage_name: str) -> int:
        return self._calls.get(stage_name, 0)

    def to_dict(self) -> dict[str, float]:
        result: dict[str, float] = {f"{k}_ms": v for k, v in self._stages.items()}
        for k, n in self._calls.items():
            if n > 1:
                result[f"{k}_calls"] = n
        result["total_ms"] = self._total_timer.elapsed_ms
        return result


class _StageTimer(Timer):
    def __init__(self, stage_name: str, parent: StageTimings):
        super().__init__()
        self._stage_name = stage_name
        self._parent = parent

    def __exit__(self, *args) -> None:
        super().__exit__(*args)
        self._parent.record(self._stage_name, self.elapsed_ms)
