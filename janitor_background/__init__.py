"""
The background loop. Runs a task, sleeps, and runs it again, forever; or just
once when the interval is zero.
"""

import time
from typing import Callable

from loguru import logger

from .task import Task


def background(
    task: Task,
    check_interval: int,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Run the task repeatedly, strictly one call after another.

    Parameters
    ----------
    task : Task
        The task to run on each cycle.
    check_interval : int
        Seconds to sleep after each call completes. Zero means run exactly
        once and return.
    sleep : Callable[[float], None]
        The function used to sleep between calls.

    Returns
    -------
    int
        The number of cycles run. Only returns in single-shot mode.

    Raises
    ------
    Exception
        Anything that the task raises is propagated, ending the loop.
    """

    cycles = 0

    while True:
        task()
        cycles += 1

        if check_interval == 0:
            logger.info("CHECK_INTERVAL is zero; exiting after a single cycle")
            return cycles

        logger.info("Sleeping for {}s", check_interval)
        sleep(check_interval)
