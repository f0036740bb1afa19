"""Job de exportación de contactos de un usuario.

Un `ArchiveJob` es una pequeña máquina de estados:

    IDLE -> RUNNING -> DONE
                    -> FAILED

`reset()` devuelve el job a IDLE desde cualquier estado. Mientras está en
RUNNING, un hilo (worker) va avanzando el progreso paso a paso y al final
ejecuta la exportación real, que devuelve la ruta del archivo generado.

Todos los campos se leen y escriben bajo `self._lock`. El worker sólo
retiene el lock para escribir un campo, nunca durante la pausa entre
pasos, así que las peticiones HTTP pueden consultar el estado en cualquier
momento. Cada ejecución recibe un identificador (`run_id`) y un evento de
cancelación: `reset()` activa el evento e invalida el identificador, de
forma que un worker antiguo nunca vuelve a tocar el estado.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from app.core.enums import ArchiveStatus
from app.models.archive import ArchiveSnapshot

logger = logging.getLogger(__name__)

ExportCallable = Callable[[], Path]


class ArchiveJob:
    """Exportación en segundo plano con progreso consultable."""

    def __init__(
        self,
        export: ExportCallable,
        steps: int = 100,
        step_interval: float = 0.05,
        name: str = "archive",
    ) -> None:
        if steps < 1:
            raise ValueError("steps must be >= 1")
        if step_interval < 0:
            raise ValueError("step_interval must be >= 0")

        self.name = name
        self.steps = steps
        self.step_interval = step_interval
        self._export = export

        self._lock = threading.Lock()
        self._status = ArchiveStatus.IDLE
        self._progress = 0.0
        self._result: Optional[Path] = None
        self._error_message: Optional[str] = None

        # Ejecución vigente; un worker con otro run_id ya no puede escribir
        self._run_id = 0
        self._cancel_event: Optional[threading.Event] = None
        self._worker: Optional[threading.Thread] = None

    # ---------- API PÚBLICA ----------

    def start(self) -> bool:
        """Lanza la exportación si el job está en IDLE.

        Devuelve True si se ha programado un worker nuevo. En cualquier otro
        estado la llamada no hace nada y devuelve False.
        """
        with self._lock:
            if self._status != ArchiveStatus.IDLE:
                return False

            self._status = ArchiveStatus.RUNNING
            self._progress = 0.0
            self._result = None
            self._error_message = None

            self._run_id += 1
            cancel_event = threading.Event()
            self._cancel_event = cancel_event
            self._worker = threading.Thread(
                target=self._run,
                args=(self._run_id, cancel_event),
                name=f"archive-{self.name}-{self._run_id}",
                daemon=True,
            )
            self._worker.start()

        logger.info("Archive %s started", self.name)
        return True

    def reset(self) -> None:
        """Vuelve a IDLE y cancela el worker en curso, si lo hay."""
        with self._lock:
            was_running = self._status == ArchiveStatus.RUNNING
            if self._cancel_event is not None:
                self._cancel_event.set()
                self._cancel_event = None
            self._run_id += 1

            self._status = ArchiveStatus.IDLE
            self._progress = 0.0
            self._result = None
            self._error_message = None

        if was_running:
            logger.info("Archive %s cancelled by reset", self.name)
        else:
            logger.debug("Archive %s reset", self.name)

    def snapshot(self) -> ArchiveSnapshot:
        """Copia coherente de status, progreso, resultado y error."""
        with self._lock:
            return ArchiveSnapshot(
                status=self._status,
                progress=self._progress,
                result=self._result,
                error_message=self._error_message,
            )

    def result(self) -> Optional[Path]:
        """Ruta del archivo exportado, o None si todavía no está listo."""
        with self._lock:
            if self._status != ArchiveStatus.DONE:
                return None
            return self._result

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Espera a que termine el worker actual. Útil en tests.

        Devuelve True si no queda ningún worker vivo.
        """
        with self._lock:
            worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    # ---------- WORKER ----------

    def _run(self, run_id: int, cancel_event: threading.Event) -> None:
        for step in range(self.steps + 1):
            # wait() devuelve True en cuanto se cancela, sin agotar la pausa
            if cancel_event.wait(self.step_interval):
                return
            if not self._set_progress(run_id, step / self.steps):
                return

        try:
            output_path = self._export()
        except Exception as e:
            logger.exception("Archive %s export failed", self.name)
            self._finish(run_id, error_message=str(e) or e.__class__.__name__)
            return

        self._finish(run_id, result=output_path)

    def _is_current(self, run_id: int) -> bool:
        # Debe llamarse con el lock tomado
        return self._run_id == run_id and self._status == ArchiveStatus.RUNNING

    def _set_progress(self, run_id: int, progress: float) -> bool:
        with self._lock:
            if not self._is_current(run_id):
                return False
            self._progress = max(self._progress, min(progress, 1.0))
            return True

    def _finish(
        self,
        run_id: int,
        result: Optional[Path] = None,
        error_message: Optional[str] = None,
    ) -> None:
        with self._lock:
            if not self._is_current(run_id):
                logger.debug("Archive %s: discarding stale run %s", self.name, run_id)
                return
            if error_message is not None:
                self._status = ArchiveStatus.FAILED
                self._error_message = error_message
            else:
                self._status = ArchiveStatus.DONE
                self._progress = 1.0
                self._result = result

        if error_message is None:
            logger.info("Archive %s completed: %s", self.name, result)
