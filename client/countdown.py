"""
Cronômetro de descanso entre séries.

Máquina de estados explícita (idle, running, paused, finished). O relógio
vem de fora: qualquer agendador com ``schedule_interval(callback, intervalo)``
e ``schedule_once(callback, atraso)`` devolvendo um evento com ``cancel()``
(o ``kivy.clock.Clock`` segue esse formato).
"""

import logging
import re
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"\d+(?:[.,]\d+)?")


def parse_rest_seconds(rest: Optional[str]) -> int:
    """
    Converte o texto de descanso em segundos.

    "90" -> 90, "60s" -> 60, "2min" -> 120, "1,5 min" -> 90.
    Texto vazio ou sem número -> 0.
    """
    if not rest:
        return 0
    match = _NUMBER_RE.search(rest)
    if not match:
        return 0
    value = float(match.group(0).replace(",", "."))
    if "min" in rest.lower():
        value *= 60
    return int(round(value))


def format_seconds(seconds: int) -> str:
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes:02d}:{secs:02d}"


class CountdownState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class RestCountdown:
    def __init__(
        self,
        exercise_id: str,
        initial_seconds: int,
        scheduler,
        on_finish: Optional[Callable[[str], None]] = None,
        on_cue: Optional[Callable[[], None]] = None,
        interval: float = 1.0,
    ) -> None:
        self.exercise_id = exercise_id
        self.initial_seconds = initial_seconds
        self.remaining = initial_seconds
        self.state = CountdownState.IDLE
        self.scheduler = scheduler
        self.on_finish = on_finish
        self.on_cue = on_cue
        self.interval = interval
        self._event = None

    # ---------- agendamento ----------

    def _schedule(self) -> None:
        self._cancel()
        self._event = self.scheduler.schedule_interval(self.tick, self.interval)

    def _cancel(self) -> None:
        if self._event is not None:
            self._event.cancel()
            self._event = None

    # ---------- transições ----------

    def start(self) -> bool:
        if self.initial_seconds <= 0 or self.remaining <= 0:
            return False
        if self.state not in (CountdownState.IDLE, CountdownState.PAUSED):
            return False
        self.state = CountdownState.RUNNING
        self._schedule()
        return True

    def pause(self) -> None:
        if self.state == CountdownState.RUNNING:
            self._cancel()
            self.state = CountdownState.PAUSED

    def resume(self) -> None:
        if self.state == CountdownState.PAUSED:
            self.start()

    def toggle(self) -> None:
        if self.state == CountdownState.RUNNING:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self._cancel()
        self.remaining = self.initial_seconds
        self.state = CountdownState.IDLE

    def dismiss(self) -> None:
        """Descarta o cronômetro sem disparar o aviso sonoro."""
        self._cancel()
        self.state = CountdownState.IDLE

    def tick(self, dt=None) -> None:
        if self.state != CountdownState.RUNNING:
            return
        self.remaining -= 1
        if self.remaining <= 0:
            self.remaining = 0
            self._finish()

    def _finish(self) -> None:
        self._cancel()
        self.state = CountdownState.FINISHED
        if self.on_cue is not None:
            try:
                self.on_cue()
            except Exception:
                # sem som o descanso termina do mesmo jeito
                logger.exception("Não foi possível tocar o aviso sonoro")
        if self.on_finish is not None:
            self.on_finish(self.exercise_id)

    # ---------- exibição ----------

    @property
    def is_running(self) -> bool:
        return self.state == CountdownState.RUNNING

    @property
    def progress(self) -> float:
        if self.initial_seconds <= 0:
            return 0.0
        return self.remaining / self.initial_seconds * 100

    @property
    def display(self) -> str:
        return format_seconds(self.remaining)
