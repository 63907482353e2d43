"""Chat-completion gateway used by every thinking agent."""

from .gateway import ModelGateway, ModelOptions, ModelResponse, get_model_gateway

__all__ = ["ModelGateway", "ModelOptions", "ModelResponse", "get_model_gateway"]
