#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hint Trigger Scheduler Module
Delayed, cancellable callbacks for route-triggered hints
"""

import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple


class TaskState(Enum):
    """Scheduled task state"""
    PENDING = "pending"
    FIRED = "fired"
    CANCELLED = "cancelled"


class ScheduledTask:
    """
    Handle for one delayed callback

    A task fires at most once. Once cancelled it never fires, even if its
    timer has already expired but the callback has not started yet.
    """

    def __init__(self, task_id: int, name: str, delay: float,
                 callback: Callable[[], None],
                 on_cancel: Optional[Callable[['ScheduledTask'], None]] = None):
        self.task_id = task_id
        self.name = name
        self.delay = delay
        self.callback = callback
        self.state = TaskState.PENDING
        self._on_cancel = on_cancel
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self.state == TaskState.PENDING

    @property
    def cancelled(self) -> bool:
        return self.state == TaskState.CANCELLED

    def cancel(self) -> bool:
        """
        Cancel the task

        Returns:
            bool: True if the task was pending and is now cancelled
        """
        with self._lock:
            if self.state != TaskState.PENDING:
                return False
            self.state = TaskState.CANCELLED

        if self._on_cancel:
            self._on_cancel(self)
        return True

    def _claim(self) -> bool:
        """Move PENDING -> FIRED; False if cancelled in the meantime"""
        with self._lock:
            if self.state != TaskState.PENDING:
                return False
            self.state = TaskState.FIRED
            return True

    def run(self, logger: logging.Logger) -> bool:
        """Run the callback if the task is still pending"""
        if not self._claim():
            return False
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Scheduled task {self.name}#{self.task_id} failed: {e}")
        return True

    def __repr__(self) -> str:
        return f"ScheduledTask(id={self.task_id}, name={self.name!r}, state={self.state.value})"


class HintTriggerScheduler(ABC):
    """Schedules delayed callbacks and hands back cancellable handles"""

    def __init__(self):
        self.logger = logging.getLogger(f'haloguide.{self.__class__.__name__.lower()}')
        self._ids = itertools.count(1)

    def _new_task(self, name: str, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        return ScheduledTask(next(self._ids), name, delay, callback, on_cancel=self._on_cancel)

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None],
                 name: str = "task") -> ScheduledTask:
        """Run ``callback`` after ``delay`` seconds unless cancelled first"""

    @abstractmethod
    def _on_cancel(self, task: ScheduledTask):
        """Release backend resources held for a cancelled task"""

    @abstractmethod
    def pending_tasks(self) -> List[ScheduledTask]:
        """Tasks that have neither fired nor been cancelled"""

    def cancel_all(self) -> int:
        """Cancel every pending task, returns how many were cancelled"""
        return sum(1 for task in self.pending_tasks() if task.cancel())

    def shutdown(self):
        """Stop the scheduler"""
        cancelled = self.cancel_all()
        if cancelled:
            self.logger.debug(f"Cancelled {cancelled} pending tasks on shutdown")


class ThreadingHintScheduler(HintTriggerScheduler):
    """
    Wall-clock scheduler backed by ``threading.Timer``

    Callbacks run on the timer thread; callers serialise state access.
    """

    def __init__(self):
        super().__init__()
        self._timers: Dict[int, Tuple[ScheduledTask, threading.Timer]] = {}
        self._lock = threading.Lock()

    def schedule(self, delay: float, callback: Callable[[], None],
                 name: str = "task") -> ScheduledTask:
        task = self._new_task(name, delay, callback)
        timer = threading.Timer(delay, self._fire, args=(task,))
        timer.daemon = True
        timer.name = f"HintTrigger-{task.task_id}"

        with self._lock:
            self._timers[task.task_id] = (task, timer)
        timer.start()

        self.logger.debug(f"Scheduled {name}#{task.task_id} in {delay:.2f}s")
        return task

    def _fire(self, task: ScheduledTask):
        with self._lock:
            self._timers.pop(task.task_id, None)
        task.run(self.logger)

    def _on_cancel(self, task: ScheduledTask):
        with self._lock:
            entry = self._timers.pop(task.task_id, None)
        if entry:
            entry[1].cancel()
        self.logger.debug(f"Cancelled {task.name}#{task.task_id}")

    def pending_tasks(self) -> List[ScheduledTask]:
        with self._lock:
            return [task for task, _ in self._timers.values() if task.pending]


class ManualHintScheduler(HintTriggerScheduler):
    """
    Virtual-clock scheduler

    Nothing fires until the host calls ``advance``. Suits hosts that drive
    their own event loop, and tests that need deterministic timing.
    """

    def __init__(self):
        super().__init__()
        self.now = 0.0
        self._queue: List[Tuple[float, int, ScheduledTask]] = []

    def schedule(self, delay: float, callback: Callable[[], None],
                 name: str = "task") -> ScheduledTask:
        task = self._new_task(name, delay, callback)
        heapq.heappush(self._queue, (self.now + delay, task.task_id, task))
        self.logger.debug(f"Scheduled {name}#{task.task_id} at t={self.now + delay:.2f}")
        return task

    def _on_cancel(self, task: ScheduledTask):
        # Cancelled entries stay queued and are skipped when due
        self.logger.debug(f"Cancelled {task.name}#{task.task_id}")

    def advance(self, seconds: float) -> int:
        """
        Move the virtual clock forward and fire due tasks in order

        Args:
            seconds: Time to advance

        Returns:
            int: Number of callbacks that ran
        """
        if seconds < 0:
            raise ValueError("cannot move the clock backwards")

        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            self.now = due
            if task.run(self.logger):
                fired += 1
        self.now = target
        return fired

    def pending_tasks(self) -> List[ScheduledTask]:
        return [task for _, _, task in sorted(self._queue) if task.pending]
