"""Shared test helpers."""

from PySide6.QtCore import QCoreApplication


def wait_for_worker(aggregator):
    """Wait for any background aggregation worker to finish and deliver its signal."""
    if aggregator._worker is not None:
        aggregator._worker.wait(5000)
    QCoreApplication.processEvents()
