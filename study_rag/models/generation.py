"""
Generation profile models.

ModelProfile describes one way of calling a generative model (provider,
model id, sampling parameters and a prompt token ceiling). The router picks a
profile per question; retries derive tightened copies of it.

Dependencies: pydantic
System role: Generative model configuration contracts
"""

from pydantic import BaseModel, Field


class ModelProfile(BaseModel):
    """A routed model configuration."""

    name: str = Field(description="Routing label (default, technical, detailed, ...)")
    provider: str = Field(
        default="google_genai",
        description="LangChain provider key understood by init_chat_model",
    )
    model: str = Field(description="Provider model identifier")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, ge=1, description="Completion token budget")
    top_p: float = Field(default=0.9, gt=0.0, le=1.0)
    token_limit: int = Field(
        default=6000,
        ge=1,
        description="Estimated prompt tokens this profile accepts before trimming",
    )

    def escalate(self, temperature_step: float, token_growth: float) -> "ModelProfile":
        """
        Derive the profile for a quality-gate retry.

        Temperature goes down by temperature_step (never below zero) and the
        completion budget grows by token_growth.

        Args:
            temperature_step: Amount subtracted from temperature
            token_growth: Multiplier applied to max_tokens

        Returns:
            ModelProfile: Tightened copy of this profile
        """
        return self.model_copy(
            update={
                "temperature": max(0.0, round(self.temperature - temperature_step, 4)),
                "max_tokens": max(self.max_tokens + 1, int(self.max_tokens * token_growth)),
            }
        )
