"""CLI entry point for the CostLens SDK (offline: nothing is sent anywhere)."""

import argparse
import asyncio
import json
from typing import List, Optional

from .api.client import CostLensClient
from .core.quality.detector import QualityDetector
from .models.conversation_types import ConversationMessage, TurnRole


def _messages(prompt: str, system: Optional[str] = None) -> List[ConversationMessage]:
    messages = []
    if system:
        messages.append(ConversationMessage(role=TurnRole.SYSTEM, content=system))
    messages.append(ConversationMessage(role=TurnRole.USER, content=prompt))
    return messages


async def estimate(model: str, prompt: str, system: Optional[str] = None, as_json: bool = False):
    """Print the estimated cost of a prompt and the savings of routing it."""
    messages = _messages(prompt, system)
    async with CostLensClient(log_level="silent") as client:
        savings = await client.calculate_savings(model, messages)

    if as_json:
        print(json.dumps(savings.model_dump(), indent=2))
        return

    print(f"Model:             {model}")
    print(f"Estimated cost:    ${savings.current_cost:.6f}")
    print(f"Recommended model: {savings.recommended_model}")
    print(f"Recommended cost:  ${savings.optimized_cost:.6f}")
    print(f"Savings:           ${savings.savings:.6f} ({savings.savings_percentage:.1f}%)")


async def route(model: str, prompt: str, system: Optional[str] = None):
    """Print the routing decision for a prompt."""
    messages = _messages(prompt, system)
    async with CostLensClient(log_level="silent") as client:
        selected = await client.select_optimal_model(model, messages)
    decision = QualityDetector.should_route(model, messages)

    print(f"Requested model: {model}")
    print(f"Selected model:  {selected}")
    print(f"Quality check:   {decision.reasoning} (confidence {decision.confidence:.2f})")


def show_pricing():
    """Print the price table and the freshness advisory."""
    client = CostLensClient(log_level="silent")
    pricing = client.orchestrator.estimator.pricing

    print("Model pricing (USD per 1M tokens):")
    print("-" * 50)
    for key, price in pricing.items():
        print(f"{key:<22} input ${price.input:>8.3f}   output ${price.output:>8.3f}")
    print()

    advisory = client.validate_pricing()
    print(f"Last verified: {advisory['last_updated']}")
    print(advisory["message"])
    for recommendation in advisory["recommendations"]:
        print(f"  - {recommendation}")


def main(argv: Optional[List[str]] = None):
    """Main CLI function."""
    parser = argparse.ArgumentParser(description="CostLens SDK CLI")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    estimate_parser = subparsers.add_parser('estimate', help='Estimate the cost of a prompt')
    estimate_parser.add_argument('model', help='Model name (e.g., "gpt-4")')
    estimate_parser.add_argument('prompt', help='Text prompt')
    estimate_parser.add_argument('--system', help='Optional system prompt')
    estimate_parser.add_argument('--json', action='store_true', help='Print JSON')

    route_parser = subparsers.add_parser('route', help='Show which model a prompt would be routed to')
    route_parser.add_argument('model', help='Requested model name')
    route_parser.add_argument('prompt', help='Text prompt')
    route_parser.add_argument('--system', help='Optional system prompt')

    subparsers.add_parser('pricing', help='Show the model price table')

    args = parser.parse_args(argv)

    if args.command == 'estimate':
        asyncio.run(estimate(args.model, args.prompt, args.system, args.json))
    elif args.command == 'route':
        asyncio.run(route(args.model, args.prompt, args.system))
    elif args.command == 'pricing':
        show_pricing()
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
