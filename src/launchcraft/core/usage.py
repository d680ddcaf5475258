"""Token usage and cost tracking for provider calls."""

import threading
from collections import defaultdict
from typing import Any

from launchcraft.core.logging import get_logger

logger = get_logger("launchcraft.usage")


# Pricing per 1M tokens: (input, output)
PRICING_DATA = {
    "openai": {
        "gpt-4-turbo-preview": (10.0, 30.0),
        "gpt-4-turbo": (10.0, 30.0),
        "gpt-4o": (2.5, 10.0),
        "gpt-4o-mini": (0.15, 0.60),
        "gpt-3.5-turbo": (0.5, 1.5),
    },
}


def usage_tokens(usage: dict[str, Any]) -> tuple[int, int]:
    """Read (prompt, completion) token counts from a raw provider usage dict."""
    return int(usage.get("prompt_tokens") or 0), int(usage.get("completion_tokens") or 0)


class UsageTracker:
    """
    Accumulates token usage and estimated cost per provider/model.

    Shared by every request a process serves, so counters are lock-guarded.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.total_cost = 0.0
        self.request_count = 0
        self.model_costs: dict[str, float] = defaultdict(float)
        self.model_tokens: dict[str, dict[str, int]] = defaultdict(lambda: {"input": 0, "output": 0})

    def estimate_cost(self, provider: str, model: str, tokens_input: int, tokens_output: int = 0) -> float:
        """Estimated cost in dollars; 0.0 when the model has no known pricing."""
        pricing = PRICING_DATA.get(provider, {}).get(model)
        if not pricing:
            return 0.0

        input_cost_per_1M, output_cost_per_1M = pricing
        return (tokens_input / 1_000_000) * input_cost_per_1M + (tokens_output / 1_000_000) * output_cost_per_1M

    def record(self, provider: str, model: str, usage: dict[str, Any]) -> float:
        """
        Record one call's raw usage.

        Returns:
            Estimated cost in dollars for this call
        """
        tokens_input, tokens_output = usage_tokens(usage)
        cost = self.estimate_cost(provider, model, tokens_input, tokens_output)
        key = f"{provider}/{model}"

        with self.lock:
            self.total_cost += cost
            self.request_count += 1
            self.model_costs[key] += cost
            self.model_tokens[key]["input"] += tokens_input
            self.model_tokens[key]["output"] += tokens_output

        logger.log_token_usage(provider, model, tokens_input, tokens_output, cost=cost)
        return cost

    def get_summary(self) -> dict[str, Any]:
        with self.lock:
            return {
                "total_cost": self.total_cost,
                "request_count": self.request_count,
                "model_costs": dict(self.model_costs),
                "model_tokens": {key: dict(value) for key, value in self.model_tokens.items()},
            }
