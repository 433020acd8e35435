"""
Base class for background tasks.
"""

import abc
from datetime import timedelta
from time import perf_counter
from typing import Optional

from loguru import logger
from pydantic import BaseModel


class Task(BaseModel, abc.ABC):
    """
    A task that can be called repeatedly by the background loop. Each call
    is one complete pass of the task.
    """

    name: str
    "Human readable name, used in logs."
    soft_timeout: Optional[timedelta] = None
    "Tasks check this between units of work and stop early once it has passed."

    def __call__(self):
        logger.info("Starting task {}", self.name)

        start = perf_counter()
        result = self.on_call()
        end = perf_counter()

        logger.info("Task {} finished in {:.2f} s", self.name, end - start)

        return result

    @abc.abstractmethod
    def on_call(self):
        raise NotImplementedError
