"""Cost estimation from token totals."""


# Per 1M tokens, keyed by model family
MODEL_COSTS: dict[str, dict[str, float]] = {
    "opus":   {"input": 15.00, "output": 75.00, "cache_read": 1.50},
    "sonnet": {"input": 3.00,  "output": 15.00, "cache_read": 0.30},
    "haiku":  {"input": 0.80,  "output": 4.00,  "cache_read": 0.08},
}
DEFAULT_FAMILY = "sonnet"


def model_family(model: str) -> str:
    """Match a model string to a pricing family; unknown models price as sonnet."""
    m = (model or "").lower()
    if "opus" in m:
        return "opus"
    if "haiku" in m:
        return "haiku"
    return DEFAULT_FAMILY


def estimate_cost(
    model: str,
    input_tokens: int,
    output_tokens: int,
    cache_read_tokens: int,
) -> float:
    """Estimate cost in USD.

    Cache reads are part of the reported input, so they are billed at the
    cache rate and only the remainder at the full input rate.
    """
    costs = MODEL_COSTS[model_family(model)]
    non_cache_input = max(input_tokens - cache_read_tokens, 0)
    return (
        non_cache_input * costs["input"]
        + output_tokens * costs["output"]
        + cache_read_tokens * costs["cache_read"]
    ) / 1_000_000
