"""
Example: Routing, caching and tracking with wrapped clients

Requires OPENAI_API_KEY (and ANTHROPIC_API_KEY for the second example).
Set COSTLENS_API_KEY to send run records to CostLens; without it the
client runs in instant mode and nothing leaves the process.
"""

import asyncio

from costlens_sdk import CostLensClient, Middleware


class UserTagger(Middleware):
    """Adds an OpenAI ``user`` field to every request."""

    async def before(self, params):
        return {**params, "user": "examples"}

    async def on_error(self, error, context):
        print(f"Call to {context.model} failed after {context.latency_ms}ms: {error}")


async def example_openai():
    print("=== OpenAI with smart routing ===\n")

    async with CostLensClient.from_env(middleware=[UserTagger()]) as client:
        openai = client.wrap_openai()
        messages = [{"role": "user", "content": "Hi"}]

        savings = await client.calculate_savings("gpt-4", messages)
        print(f"Routing gpt-4 -> {savings.recommended_model} saves ~{savings.savings_percentage:.1f}%")

        response = await openai.chat.completions.create(
            model="gpt-4",
            messages=messages,
            max_tokens=50,
            options={"prompt_id": "greeting"},
        )
        print(response.choices[0].message.content)

        # Identical request: served from the in-process cache
        await openai.chat.completions.create(model="gpt-4", messages=messages, max_tokens=50)
        print(f"\nAnalytics: {client.get_cost_analytics()}")


async def example_anthropic():
    print("\n=== Anthropic with a cost ceiling ===\n")

    async with CostLensClient.from_env(cost_limit=0.01) as client:
        anthropic = client.wrap_anthropic()
        response = await anthropic.messages.create(
            model="claude-3-opus",
            max_tokens=100,
            messages=[{"role": "user", "content": "Write a haiku about caching."}],
        )
        print(response.content[0].text)


async def main():
    await example_openai()
    await example_anthropic()


if __name__ == "__main__":
    asyncio.run(main())
