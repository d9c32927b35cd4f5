import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from school_directory.services.school_api import (
    NETWORK_ERROR_MESSAGE,
    SchoolApiClient,
    ServerRejection,
    TransportError,
)
from school_directory.utils.school_validator import FIELDS, SchoolValidator

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = 'School added successfully!'


class SubmissionStatus(Enum):
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


@dataclass(frozen=True)
class SubmissionState:
    status: SubmissionStatus
    message: Optional[str] = None

    @classmethod
    def idle(cls):
        return cls(SubmissionStatus.IDLE)

    @classmethod
    def submitting(cls):
        return cls(SubmissionStatus.SUBMITTING)

    @classmethod
    def succeeded(cls, message: str):
        return cls(SubmissionStatus.SUCCEEDED, message)

    @classmethod
    def failed(cls, message: str):
        return cls(SubmissionStatus.FAILED, message)

    @property
    def is_submitting(self) -> bool:
        return self.status is SubmissionStatus.SUBMITTING


def _empty_values() -> Dict[str, Any]:
    return {field: (None if field == 'image' else '') for field in FIELDS}


class SchoolSubmission:
    """State of one add-school form: values, live errors and the submission lifecycle.

    ``on_success`` is invoked once, ``success_delay`` seconds after a successful
    submission, unless the submission is disposed first.
    """

    def __init__(self, api: SchoolApiClient, on_success: Optional[Callable[[], None]] = None,
                 success_delay: float = 2.0, validator: Optional[SchoolValidator] = None,
                 timer_factory=threading.Timer):
        self.api = api
        self.on_success = on_success
        self.success_delay = success_delay
        self.validator = validator or SchoolValidator()
        self.timer_factory = timer_factory

        self.values = _empty_values()
        self.errors: Dict[str, str] = {}
        self.touched = set()
        self.state = SubmissionState.idle()

        self._lock = threading.Lock()
        self._timers = []
        self._disposed = False

    # -- form editing ---------------------------------------------------

    def update_field(self, field: str, value: Any) -> Optional[str]:
        """Set a field, mark it touched and revalidate. Returns the field's error."""
        if field not in self.values:
            raise KeyError(f"Unknown school field: {field}")
        self.values[field] = value
        self.touched.add(field)
        self._revalidate()
        return self.errors.get(field)

    def update(self, values: Dict[str, Any]):
        for field, value in values.items():
            self.update_field(field, value)

    def _revalidate(self):
        _, self.errors = self.validator.validate(self.values)

    @property
    def visible_errors(self) -> Dict[str, str]:
        return {field: message for field, message in self.errors.items() if field in self.touched}

    @property
    def is_valid(self) -> bool:
        is_valid, _ = self.validator.validate(self.values)
        return is_valid

    # -- lifecycle ------------------------------------------------------

    def submit(self) -> SubmissionState:
        if self.state.is_submitting:
            logger.warning("Ignoring submit while a submission is in flight")
            return self.state

        self.touched.update(FIELDS)
        self._revalidate()
        if self.errors:
            logger.info(f"School form invalid: {', '.join(sorted(self.errors))}")
            self.state = SubmissionState.idle()
            return self.state

        school = self.validator.build_input(self.values)
        self.state = SubmissionState.submitting()
        try:
            self.api.create_school(school)
        except ServerRejection as e:
            self.state = SubmissionState.failed(e.message)
        except TransportError:
            self.state = SubmissionState.failed(NETWORK_ERROR_MESSAGE)
        except Exception:
            # Leave the form submittable again before propagating
            self.state = SubmissionState.idle()
            raise
        else:
            self._clear_form()
            self.state = SubmissionState.succeeded(SUCCESS_MESSAGE)
            self._schedule_success()
        return self.state

    def reset(self) -> SubmissionState:
        """Clear every field and message. Any pending success notification still fires."""
        self._clear_form()
        self.state = SubmissionState.idle()
        return self.state

    def dispose(self):
        """Tear down: cancel pending success timers and drop any late notification."""
        with self._lock:
            self._disposed = True
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _clear_form(self):
        self.values = _empty_values()
        self.errors = {}
        self.touched = set()

    @property
    def pending_notifications(self) -> int:
        with self._lock:
            return len(self._timers)

    def _schedule_success(self):
        if self.on_success is None:
            return
        with self._lock:
            if self._disposed:
                return
            timer = self.timer_factory(self.success_delay, lambda: self._fire_success(timer))
            timer.daemon = True
            self._timers.append(timer)
        timer.start()

    def _fire_success(self, timer):
        with self._lock:
            if self._disposed or timer not in self._timers:
                logger.debug("Submission disposed before success notification")
                return
            self._timers.remove(timer)
            callback = self.on_success
        callback()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
