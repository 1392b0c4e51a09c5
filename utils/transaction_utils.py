"""
Transaction utilities for multi-step writes.

Sale finalization and seller removal touch several tables in a fixed order.
``atomic_sequence`` runs such a sequence inside one database transaction and
logs every step's outcome, so a failure half-way leaves nothing applied and the
log still shows how far the sequence got.

Usage:
    with atomic_sequence("finalize_sale") as seq:
        deleted = Product.objects.filter(id=product_id).delete()[0]
        seq.step("delete_product", deleted=deleted)
        ...
"""

import logging
import time
from contextlib import contextmanager

from django.db import IntegrityError, OperationalError, transaction

from utils.logging_utils import mask_mapping

logger = logging.getLogger(__name__)


class TransactionError(Exception):
    """Raised when a sequence fails for a database reason."""

    pass


class StepLog:
    """Collects the outcome of each step of a sequence."""

    def __init__(self, name: str):
        self.name = name
        self.steps = []

    def step(self, step_name: str, **outcome):
        self.steps.append((step_name, outcome))
        logger.info(f"[{self.name}] step {len(self.steps)} {step_name}: {mask_mapping(outcome)}")


@contextmanager
def atomic_sequence(operation_name: str, using: str = "default"):
    """
    Run an ordered sequence of writes in a single transaction.

    Database errors are re-raised as TransactionError; any other exception
    propagates unchanged. Either way the transaction is rolled back.
    """
    start_time = time.time()
    log = StepLog(operation_name)
    logger.debug(f"Starting sequence: {operation_name}")

    try:
        with transaction.atomic(using=using):
            yield log
    except (IntegrityError, OperationalError) as e:
        elapsed = time.time() - start_time
        logger.error(
            f"Sequence '{operation_name}' rolled back after {elapsed:.3f}s "
            f"({len(log.steps)} step(s) undone): {e}"
        )
        raise TransactionError(f"{operation_name} failed: {e}") from e
    except Exception as e:
        elapsed = time.time() - start_time
        logger.error(
            f"Sequence '{operation_name}' rolled back after {elapsed:.3f}s "
            f"({len(log.steps)} step(s) undone): {e}"
        )
        raise
    else:
        elapsed = time.time() - start_time
        logger.info(f"Sequence '{operation_name}' committed {len(log.steps)} step(s) in {elapsed:.3f}s")
