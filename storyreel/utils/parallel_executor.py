"""Parallel Executor - fans out per-segment provider calls and joins them in order."""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Optional

from storyreel.core.config import Settings


class ParallelExecutor:
    """Runs a batch of callables with bounded concurrency."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize parallel executor.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.max_parallel_api_calls = max(1, settings.max_parallel_api_calls)

    def execute_api_calls(
        self,
        tasks: list[Callable[[], Any]],
        task_names: Optional[list[str]] = None,
        job_id: Optional[str] = None,
        max_workers: Optional[int] = None,
    ) -> list[tuple[Any, Optional[Exception]]]:
        """
        Execute a batch of calls and wait for every one of them.

        Results come back in submission order regardless of completion
        order, so callers can zip them with their inputs.

        Args:
            tasks: Callables to execute
            task_names: Optional names for logging
            job_id: Optional job ID for logging context
            max_workers: Maximum number of parallel workers (defaults to max_parallel_api_calls)

        Returns:
            List of tuples: (result, exception) for each task
        """
        if not tasks:
            return []

        max_workers = max_workers or self.max_parallel_api_calls
        log_prefix = f"[{job_id}] " if job_id else ""
        names = [
            task_names[i] if task_names and i < len(task_names) else f"api_call_{i+1}"
            for i in range(len(tasks))
        ]

        if max_workers == 1:
            results = []
            for name, task in zip(names, tasks):
                try:
                    results.append((task(), None))
                except Exception as e:
                    self.logger.error(f"{log_prefix}❌ {name} failed: {e}")
                    results.append((None, e))
            return results

        self.logger.debug(f"{log_prefix}Parallel API calls: {len(tasks)} tasks with max {max_workers} workers")
        start_time = time.time()
        results: list[tuple[Any, Optional[Exception]]] = [(None, None)] * len(tasks)
        completed_count = 0

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_index = {executor.submit(task): i for i, task in enumerate(tasks)}

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                completed_count += 1
                elapsed = time.time() - start_time
                try:
                    results[index] = (future.result(), None)
                    self.logger.debug(
                        f"{log_prefix}✅ {names[index]} completed ({completed_count}/{len(tasks)}) in {elapsed:.2f}s"
                    )
                except Exception as e:
                    self.logger.warning(
                        f"{log_prefix}❌ {names[index]} failed ({completed_count}/{len(tasks)}) after {elapsed:.2f}s: {e}"
                    )
                    results[index] = (None, e)

        successful = sum(1 for _, error in results if error is None)
        self.logger.debug(
            f"{log_prefix}API batch complete: {successful}/{len(tasks)} successful in {time.time() - start_time:.2f}s"
        )
        return results
