"""LLM client configuration.

Default parameters for LLM API calls. These can be overridden in the config
file but provide sensible defaults for most use cases.
"""

# =============================================================================
# Generation Defaults
# =============================================================================
# MAX_TOKENS matches the response budget the generator was tuned with. Test
# code for a single file rarely needs more.

MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7

# =============================================================================
# Placeholder Responses
# =============================================================================
# Without an API key the generator returns a deterministic placeholder that
# echoes the start of the prompt, so the rest of the flow can be exercised
# without a live provider.

PLACEHOLDER_PROMPT_CHARS = 200
PLACEHOLDER_HEADER = (
    "Mock AI Response for testing purposes.\n\n"
    "This would contain the actual AI-generated content based on the prompt:\n\n"
)
