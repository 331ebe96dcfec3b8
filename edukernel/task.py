"""Task pool with a first-come, first-served ready queue."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from .console import Console

__all__ = ["TaskState", "Task", "PoolExhausted", "TaskManager"]

USER_TASK_NUM = 8  # init + shell + the demo tasks, with room to spare
SYSTEM_TASK_NUM = 2  # idle and init
IDLE_TASK_ID = 0

TaskBody = Callable[[], object]


def _empty() -> None:
    """Entrance of an unused pool slot."""


def _idle() -> None:
    """Entrance of the idle task; scheduling itself is done by the manager."""


class TaskState(enum.IntEnum):
    WAIT = -1
    READY = 0
    RUNNING = 1
    NONE = 2


@dataclass(eq=False)
class Task:
    """One slot of the task pool."""

    task_id: int
    state: TaskState = TaskState.NONE
    entrance: TaskBody = field(default=_empty)


class PoolExhausted(Exception):
    """Raised when every slot of the task pool is in use."""


class TaskManager:
    """Creates tasks in a fixed-size pool and runs them to completion in FCFS order."""

    def __init__(self, console: Console, user_task_num: int = USER_TASK_NUM) -> None:
        if user_task_num < 0:
            raise ValueError("the number of user tasks must not be negative")
        self.console = console
        self._pool = [Task(i) for i in range(SYSTEM_TASK_NUM + user_task_num)]
        self._ready: deque[Task] = deque()
        self.idle = self._pool[IDLE_TASK_ID]
        self.idle.entrance = _idle
        self.idle.state = TaskState.READY
        self._current: Task | None = None

    @property
    def pool(self) -> tuple[Task, ...]:
        """Every slot of the pool, in id order."""
        return tuple(self._pool)

    @property
    def current(self) -> Task | None:
        """The task being run, the idle task after a run, or ``None`` before one."""
        return self._current

    def create(self, body: TaskBody) -> int:
        """Put ``body`` in the first free slot, queue it and return its id."""
        for task in self._pool:
            if task.state == TaskState.NONE:
                task.entrance = body
                task.state = TaskState.READY
                self._ready.append(task)
                return task.task_id
        raise PoolExhausted(f"all {len(self._pool)} task slots are in use")

    def destroy(self, task_id: int) -> bool:
        """Release the slot of a live task; return whether one was released."""
        if task_id == IDLE_TASK_ID:
            raise ValueError("the idle task cannot be destroyed")
        for task in self._pool:
            if task.task_id == task_id and task.state != TaskState.NONE:
                self._release(task)
                return True
        return False

    def _release(self, task: Task) -> None:
        if task in self._ready:
            self._ready.remove(task)
        task.state = TaskState.NONE
        task.entrance = _empty

    def ready_tasks(self) -> tuple[Task, ...]:
        """The queued tasks, head first."""
        return tuple(self._ready)

    def run(self, init_body: TaskBody) -> None:
        """Create the init task and run queued tasks until the queue is empty."""
        self.create(init_body)
        self.console.printk(0x2, "START MULTITASKING......\n")
        while self._ready:
            task = self._ready[0]
            self._current = task
            task.state = TaskState.RUNNING
            try:
                task.entrance()
            finally:
                if task.state != TaskState.NONE:
                    self._release(task)
        self._current = self.idle
        self.console.printk(0x2, "STOP MULTITASKING......SHUT DOWN\n")