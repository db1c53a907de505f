"""
Temporal worker: polls the food-orders task queue.

Registers FulfillmentWorkflow and the four stage activities. Multiple
workers can poll the same task queue for horizontal scaling.

Run with:
    python -m food_order.worker
"""

import asyncio
import logging

from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter
from temporalio.worker import Worker

from food_order.activities import ALL_ACTIVITIES
from food_order.config import LOG_FORMAT, load_config
from food_order.services.factory import ServiceFactory
from food_order.workflows import FulfillmentWorkflow


async def run_worker() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)

    config = load_config()
    ServiceFactory.configure(config)

    # The same data_converter must be used by the client that starts workflows.
    client = await Client.connect(config.temporal.address, data_converter=pydantic_data_converter)
    logger.info("Connected to Temporal - starting worker on queue %r", config.temporal.task_queue)

    worker = Worker(
        client,
        task_queue=config.temporal.task_queue,
        workflows=[FulfillmentWorkflow],
        activities=ALL_ACTIVITIES,
    )
    await worker.run()


def main() -> None:
    asyncio.run(run_worker())


if __name__ == "__main__":
    main()
