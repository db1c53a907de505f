"""
CLI client: drives the workflow and shows tracker, status and receipt.

By default every stage goes over the HTTP API (``client.base_url`` in the
configuration, or FOOD_ORDER_API_URL). ``--local`` runs the services
in-process instead, which needs no server.

Usage:
    # Look up a restaurant:
    python -m food_order.client search "Pasta Hub"

    # Full chain: search → order → payment → delivery:
    python -m food_order.client order --restaurant "Pasta Hub" --item "Alfredo Pasta"

    # Retry a declined payment / confirm delivery for an order you hold:
    python -m food_order.client pay --order-id ORD-4K2Q9Z --amount 7
    python -m food_order.client deliver --order-id ORD-4K2Q9Z

    # Same chain as a durable Temporal workflow (needs a running worker):
    python -m food_order.client durable --restaurant "Pasta Hub" --item "Alfredo Pasta" --query
"""

import argparse
import asyncio
import logging
import sys
import uuid

from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter

from food_order.config import LOG_FORMAT, FoodOrderConfig, load_config
from food_order.domain.errors import FulfillmentError
from food_order.domain.models import ChainStatus, DurableChainRequest
from food_order.gateway import HttpStageGateway, LocalStageGateway, StageGateway
from food_order.orchestrator import FulfillmentOrchestrator, StageFailed
from food_order.presenters import ConsolePresenter
from food_order.services.factory import ServiceFactory
from food_order.workflows import FulfillmentWorkflow

logger = logging.getLogger(__name__)


async def run_stages(args: argparse.Namespace, gateway: StageGateway) -> int:
    presenter = ConsolePresenter()
    orchestrator = FulfillmentOrchestrator(gateway, presenter=presenter)
    presenter.show_tracker(orchestrator.tracker.snapshot())

    if args.command == "order":
        result = await orchestrator.run_chain(args.restaurant, args.item, args.force_fail)
        return 0 if result.status is ChainStatus.COMPLETED else 1

    try:
        if args.command == "search":
            await orchestrator.search(args.name)
        elif args.command == "pay":
            await orchestrator.retry_payment(args.force_fail, order_id=args.order_id, amount=args.amount)
        elif args.command == "deliver":
            await orchestrator.retry_delivery(order_id=args.order_id)
    except (StageFailed, FulfillmentError):
        # Already reported through the presenter.
        return 1
    return 0


async def run_durable(args: argparse.Namespace, config: FoodOrderConfig) -> int:
    client = await Client.connect(config.temporal.address, data_converter=pydantic_data_converter)
    req = DurableChainRequest(
        restaurant_name=args.restaurant,
        item=args.item,
        force_fail=args.force_fail,
        stage_timeout_seconds=config.temporal.stage_timeout_seconds,
        maximum_attempts=config.temporal.maximum_attempts,
    )
    workflow_id = args.workflow_id or f"fulfillment-{uuid.uuid4().hex[:12]}"
    logger.info("Starting workflow %s", workflow_id)

    handle = await client.start_workflow(
        FulfillmentWorkflow.run,
        req,
        id=workflow_id,
        task_queue=config.temporal.task_queue,
    )
    if args.query:
        status = await handle.query(FulfillmentWorkflow.get_status)
        logger.info("Query result: %s", status)

    result = await handle.result()
    print(result.model_dump_json(indent=2, by_alias=True, exclude_none=True))
    return 0 if result.status is ChainStatus.COMPLETED else 1


async def run_client(args: argparse.Namespace) -> int:
    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO, format=LOG_FORMAT)
    config = load_config(args.config)

    if args.command == "durable":
        return await run_durable(args, config)
    if args.local:
        ServiceFactory.configure(config)
        return await run_stages(args, LocalStageGateway())
    async with HttpStageGateway(config.client.base_url, timeout=config.client.timeout) as gateway:
        return await run_stages(args, gateway)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search, order, pay and track a food order")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--local", action="store_true", help="Run the stages in-process instead of over HTTP")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Look up a restaurant by name")
    search.add_argument("name")

    order = commands.add_parser("order", help="Run the full chain: search, order, payment, delivery")
    order.add_argument("--restaurant", required=True, help="Restaurant name, e.g. 'Pasta Hub'")
    order.add_argument("--item", required=True, help="Menu item, e.g. 'Alfredo Pasta'")
    order.add_argument("--force-fail", action="store_true", help="Make the payment stage decline")

    pay = commands.add_parser("pay", help="Run the payment stage alone for an order you hold")
    pay.add_argument("--order-id", required=True)
    pay.add_argument("--amount", required=True, type=float)
    pay.add_argument("--force-fail", action="store_true", help="Make the payment stage decline")

    deliver = commands.add_parser("deliver", help="Confirm delivery for an order you hold")
    deliver.add_argument("--order-id", required=True)

    durable = commands.add_parser("durable", help="Run the full chain as a Temporal workflow")
    durable.add_argument("--restaurant", required=True)
    durable.add_argument("--item", required=True)
    durable.add_argument("--force-fail", action="store_true")
    durable.add_argument("--workflow-id", default=None, help="Workflow id (random by default)")
    durable.add_argument("--query", action="store_true", help="Query workflow status once after starting")
    return parser


def main() -> None:
    sys.exit(asyncio.run(run_client(build_parser().parse_args())))


if __name__ == "__main__":
    main()
