import queue
import threading
import time
from typing import NamedTuple, Optional

from .compiler import compile
from .config import GrapherConfig
from .derivative import derivative
from .errors import CompileError
from .evaluator import Evaluator, bind
from .logger import LOGGER
from .sampling import sample_curve, sample_surface
from .tokens import Program


class Snapshot(NamedTuple):
    """What readers see: the text a user typed and the Program compiled from it."""
    text: str
    program: Program
    version: int


class Samples(NamedTuple):
    version: int
    text: str
    axes: tuple
    values: object


# --- Graph Session ---
class GraphSession:
    """
    Owns the currently published expression and its background sampling.

    ``submit`` compiles new text; on success the new Snapshot replaces the
    old one in a single reference assignment, so readers on other threads
    see either the previous Program or the new one. A failed compile leaves
    the previous Program in place.
    """

    def __init__(self, config=None, text=None):
        self.config = config if config is not None else GrapherConfig()
        self._current: Optional[Snapshot] = None
        self._lock = threading.Lock()
        self._evaluators = threading.local()
        self._subscribers = []
        self.last_error: Optional[CompileError] = None
        self.calculation_active = False; self.calculation_thread = None; self.result_queue = queue.Queue(maxsize=1); self.pending_params = None
        self._idle = threading.Event(); self._idle.set()
        if text is not None: self.submit(text)

    # --- Published State ---
    def snapshot(self):
        return self._current

    @property
    def program(self):
        snap = self._current
        return snap.program if snap is not None else None

    @property
    def text(self):
        snap = self._current
        return snap.text if snap is not None else ""

    # --- Notifications ---
    def subscribe(self, callback, state=None):
        """Call callback(snapshot, state) after every successful submit. state belongs to the caller."""
        with self._lock:
            self._subscribers.append((callback, state))

    def unsubscribe(self, callback):
        with self._lock:
            self._subscribers = [(cb, st) for cb, st in self._subscribers if cb is not callback]

    # --- Compilation ---
    def submit(self, text):
        """
        Compile text and publish it. Returns the published Program.
        Raises CompileError (after recording it in last_error); the previous
        Program stays published in that case.
        """
        if not isinstance(text, str): text = ""
        current = self._current
        if current is not None and text.strip() == current.text.strip():
            LOGGER.debug("Expression unchanged, keeping current program.")
            self.last_error = None
            return current.program
        try:
            program = compile(text, self.config.variables)
        except CompileError as e:
            self.last_error = e
            LOGGER.warn(f"Compile failed for '{text}': {e}")
            raise
        if not program.well_formed:
            LOGGER.warn(f"'{text}' compiled to '{program.postfix()}', which cannot evaluate to a single value")
        with self._lock:
            current = self._current
            version = current.version + 1 if current is not None else 1
            snap = Snapshot(text, program, version)
            self._current = snap
            subscribers = list(self._subscribers)
        self.last_error = None
        LOGGER.info(f"Expression updated to '{text}' (v{version})")
        for callback, state in subscribers:
            callback(snap, state)
        return program

    def update(self, text):
        """Submit text and resample on success; returns False if it did not compile."""
        try:
            self.submit(text)
        except CompileError:
            return False
        self.request_samples()
        return True

    # --- Point Queries ---
    def evaluator(self):
        """This thread's Evaluator for the session, sized by config.stack_capacity."""
        evaluator = getattr(self._evaluators, 'evaluator', None)
        if evaluator is None:
            evaluator = self._evaluators.evaluator = Evaluator(self.config.stack_capacity)
        return evaluator

    def evaluate(self, bindings=None, **values):
        program = self._require_program()
        if bindings is None: bindings = {}
        return self.evaluator().run(program, bind(program, {**bindings, **values}))

    def derivative(self, x, h=None):
        program = self._require_program()
        return derivative(program, x, self.config.step if h is None else h, self.evaluator())

    def _require_program(self):
        program = self.program
        if program is None: raise RuntimeError("No expression has been submitted yet")
        return program

    # --- Background Sampling ---
    def request_samples(self, **overrides):
        """
        Start sampling the current Program on a worker thread.
        A request made while one is running replaces any queued request and
        runs once the current one finishes.
        """
        if self._current is None:
            LOGGER.debug("Nothing to sample yet.")
            return False
        params = self.config.sample_params(); params.update(overrides)
        with self._lock:
            if self.calculation_active:
                LOGGER.debug("Calculation already in progress. Queuing update.")
                self.pending_params = params
                return True
            self.calculation_active = True; self.pending_params = None; self._idle.clear()
            self.calculation_thread = threading.Thread(target=self._worker_sample, args=(params,), daemon=True)
            self.calculation_thread.start()
        return True

    def _worker_sample(self, params):
        while params is not None:
            samples = self._calculate(self._current, params)
            self._publish_result(samples)
            with self._lock:
                params = self.pending_params; self.pending_params = None
                if params is None:
                    self.calculation_active = False
                    self._idle.set()

    def _calculate(self, snap, params):
        LOGGER.debug(f"BG THREAD: Sampling '{snap.text}' with {params}")
        start_time = time.perf_counter()
        try:
            if self.config.is_surface:
                x_grid, y_grid, z_grid = sample_surface(snap.program, **params)
                samples = Samples(snap.version, snap.text, (x_grid, y_grid), z_grid)
            else:
                xs, ys = sample_curve(snap.program, **params)
                samples = Samples(snap.version, snap.text, (xs,), ys)
        except Exception as e:
            LOGGER.error("BG THREAD ERROR during sampling", e)
            return None
        total_time = (time.perf_counter() - start_time) * 1000.0
        LOGGER.debug(f"BG THREAD: Calculation complete ({total_time:.0f} ms). Samples: {samples.values.size}")
        return samples

    def _publish_result(self, samples):
        # Only the newest result matters to the reader
        while not self.result_queue.empty():
            try: self.result_queue.get_nowait()
            except queue.Empty: break
        self.result_queue.put(samples)

    def poll_result(self):
        """Newest finished Samples (None if sampling failed), or None when nothing is ready."""
        try: return self.result_queue.get_nowait()
        except queue.Empty: return None

    def wait_idle(self, timeout=None):
        return self._idle.wait(timeout)
