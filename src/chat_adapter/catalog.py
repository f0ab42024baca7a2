"""Static catalog of Anthropic models exposed through the adapter."""

from __future__ import annotations

from chat_adapter.types import ModelCost, ModelDescriptor

_USD_CENTS = "usd-cents"
_PER_MILLION = 1_000_000

MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id="claude-3-5-sonnet-20241022",
        name="Claude 3.5 Sonnet",
        aliases=("claude-3-5-sonnet-latest",),
        context=200000,
        cost=ModelCost(currency=_USD_CENTS, tokens=_PER_MILLION, input=300, output=1500),
        qualitative_speed="fast",
        max_output=8192,
        training_cutoff="2024-04",
    ),
    ModelDescriptor(
        id="claude-3-5-sonnet-20240620",
        succeeded_by="claude-3-5-sonnet-20241022",
        context=200000,
        cost=ModelCost(currency=_USD_CENTS, tokens=_PER_MILLION, input=300, output=1500),
    ),
    ModelDescriptor(
        id="claude-3-haiku-20240307",
        context=200000,
        cost=ModelCost(currency=_USD_CENTS, tokens=_PER_MILLION, input=25, output=125),
        qualitative_speed="fastest",
    ),
)


def list_model_names(models: tuple[ModelDescriptor, ...] = MODELS) -> list[str]:
    """Flatten catalog entries into ids followed by their aliases."""
    names: list[str] = []
    for model in models:
        names.append(model.id)
        names.extend(model.aliases)
    return names
