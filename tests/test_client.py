"""CLI tests, using the in-process stages."""

import pytest

from food_order.client import build_parser, run_stages
from food_order.gateway import LocalStageGateway


def parse(*argv):
    return build_parser().parse_args(list(argv))


@pytest.mark.asyncio
async def test_order_command_runs_the_chain(capsys):
    code = await run_stages(parse("order", "--restaurant", "Pasta Hub", "--item", "Alfredo Pasta"), LocalStageGateway())

    out = capsys.readouterr().out
    assert code == 0
    assert "Found restaurant: Pasta Hub" in out
    assert '"stage": "delivered"' in out
    assert "✓ delivery" in out


@pytest.mark.asyncio
async def test_forced_decline_exits_non_zero(capsys):
    args = parse("order", "--restaurant", "Pasta Hub", "--item", "Alfredo Pasta", "--force-fail")
    code = await run_stages(args, LocalStageGateway())

    out = capsys.readouterr().out
    assert code == 1
    assert "Payment failed: Payment declined." in out
    assert "Confirming delivery" not in out


@pytest.mark.asyncio
async def test_pay_and_deliver_commands_take_a_held_order(capsys):
    assert await run_stages(parse("pay", "--order-id", "ORD-ABC123", "--amount", "7"), LocalStageGateway()) == 0
    assert await run_stages(parse("deliver", "--order-id", "ORD-ABC123"), LocalStageGateway()) == 0
    out = capsys.readouterr().out
    assert "Payment successful: PAY-" in out
    assert "Delivered: " in out


@pytest.mark.asyncio
async def test_unknown_restaurant_search_exits_non_zero(capsys):
    assert await run_stages(parse("search", "Nowhere"), LocalStageGateway()) == 1
    assert "Search failed: Restaurant not found." in capsys.readouterr().out


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        parse()
